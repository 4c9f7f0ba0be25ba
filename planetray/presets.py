"""
Polynomial coefficients of the standard 1-D Earth models.

Each model lists its layers from the centre outwards. Every elastic
field is a cubic in the normalized radius ``x = r / 6371``; coefficients
are in ascending order. Oceans are replaced by the upper crust.

References
----------
- Dziewonski, A. M., & Anderson, D. L. (1981). Preliminary reference Earth
  model. Physics of the Earth and Planetary Interiors, 25(4), 297-356.
- Kennett, B. L. N., & Engdahl, E. R. (1991). Traveltimes for global
  earthquake location and phase identification. GJI, 105(2), 429-465.
- Kennett, B. L. N., Engdahl, E. R., & Buland, R. (1995). Constraints on
  seismic velocities in the Earth from traveltimes. GJI, 122(1), 108-124.
"""

from typing import Any, Dict

_PREM_RMIN = [0, 1221.5, 3480, 3630, 5600, 5701, 5771, 5971, 6151, 6291, 6346.6, 6356]
_PREM_RMAX = [1221.5, 3480, 3630, 5600, 5701, 5771, 5971, 6151, 6291, 6346.6, 6356, 6371]

_PREM_RHO = [
    [13.0885, 0, -8.8381, 0], [12.5815, -1.2638, -3.6426, -5.5281],
    [7.9565, -6.4761, 5.5283, -3.0807], [7.9565, -6.4761, 5.5283, -3.0807],
    [7.9565, -6.4761, 5.5283, -3.0807], [5.3197, -1.4836, 0, 0],
    [11.2494, -8.0298, 0, 0], [7.1089, -3.8045, 0, 0],
    [2.691, 0.6924, 0, 0], [2.691, 0.6924, 0, 0], [2.9, 0, 0, 0], [2.6, 0, 0, 0],
]
_PREM_VPV = [
    [11.2622, 0, -6.364, 0], [11.0487, -4.0362, 4.8023, -13.5732],
    [15.3891, -5.3181, 5.5242, -2.5514], [24.952, -40.4673, 51.4832, -26.6419],
    [29.2766, -23.6027, 5.5242, -2.5514], [19.0957, -9.8672, 0, 0],
    [39.7027, -32.6166, 0, 0], [20.3926, -12.2569, 0, 0],
    [0.8317, 7.218, 0, 0], [0.8317, 7.218, 0, 0], [6.8, 0, 0, 0], [5.8, 0, 0, 0],
]
_PREM_VPH = [
    [11.2622, 0, -6.364, 0], [11.0487, -4.0362, 4.8023, -13.5732],
    [15.3891, -5.3181, 5.5242, -2.5514], [24.952, -40.4673, 51.4832, -26.6419],
    [29.2766, -23.6027, 5.5242, -2.5514], [19.0957, -9.8672, 0, 0],
    [39.7027, -32.6166, 0, 0], [20.3926, -12.2569, 0, 0],
    [3.5908, 4.6172, 0, 0], [3.5908, 4.6172, 0, 0], [6.8, 0, 0, 0], [5.8, 0, 0, 0],
]
_PREM_VSV = [
    [3.6678, 0, -4.4475, 0], [0, 0, 0, 0],
    [6.9254, 1.4672, -2.0834, 0.9783], [11.1671, -13.7818, 17.4575, -9.2777],
    [22.3459, -17.2473, -2.0834, 0.9783], [9.9839, -4.9324, 0, 0],
    [22.3512, -18.5856, 0, 0], [8.9496, -4.4597, 0, 0],
    [5.8582, -1.4678, 0, 0], [5.8582, -1.4678, 0, 0], [3.9, 0, 0, 0], [3.2, 0, 0, 0],
]
_PREM_VSH = [
    [3.6678, 0, -4.4475, 0], [0, 0, 0, 0],
    [6.9254, 1.4672, -2.0834, 0.9783], [11.1671, -13.7818, 17.4575, -9.2777],
    [22.3459, -17.2473, -2.0834, 0.9783], [9.9839, -4.9324, 0, 0],
    [22.3512, -18.5856, 0, 0], [8.9496, -4.4597, 0, 0],
    [-1.0839, 5.7176, 0, 0], [-1.0839, 5.7176, 0, 0], [3.9, 0, 0, 0], [3.2, 0, 0, 0],
]
_PREM_ETA = [
    [1, 0, 0, 0], [1, 0, 0, 0], [1, 0, 0, 0], [1, 0, 0, 0], [1, 0, 0, 0],
    [1, 0, 0, 0], [1, 0, 0, 0], [1, 0, 0, 0],
    [3.3687, -2.4778, 0, 0], [3.3687, -2.4778, 0, 0], [1, 0, 0, 0], [1, 0, 0, 0],
]
_PREM_QMU = [84.6, -1, 312, 312, 312, 143, 143, 143, 80, 600, 600, 600]
_PREM_QKAPPA = [1327.7] + [57823] * 11

# isotropic replacement of the anisotropic 80-220 km zone
_IPREM_LVZ_VP = [4.1875, 3.9382, 0, 0]
_IPREM_LVZ_VS = [2.1519, 2.3481, 0, 0]

_IASP91_RMIN = [0, 1217.1, 3482, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351]
_IASP91_RMAX = [1217.1, 3482, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351, 6371]
_IASP91_RHO = [
    [13.0885, 0, -8.8381, 0], [12.5815, -1.2638, -3.6426, -5.5281],
    [7.9565, -6.4761, 5.5283, -3.0807], [7.9565, -6.4761, 5.5283, -3.0807],
    [7.9565, -6.4761, 5.5283, -3.0807], [11.2494, -8.0298, 0, 0],
    [7.1089, -3.8045, 0, 0], [2.691, 0.6924, 0, 0], [2.691, 0.6924, 0, 0],
    [2.9, 0, 0, 0], [2.6, 0, 0, 0],
]
_IASP91_VP = [
    [11.24094, 0, -4.09689, 0], [10.03904, 3.75665, -13.67046, 0],
    [14.49470, -1.47089, 0, 0], [25.1486, -41.1538, 51.9932, -26.6083],
    [25.96984, -16.93412, 0, 0], [29.38896, -21.40656, 0, 0],
    [30.78765, -23.25415, 0, 0], [25.41389, -17.69722, 0, 0],
    [8.78541, -0.74953, 0, 0], [6.5, 0, 0, 0], [5.8, 0, 0, 0],
]
_IASP91_VS = [
    [3.56454, 0, -3.45241, 0], [0, 0, 0, 0],
    [8.16616, -1.58206, 0, 0], [12.9303, -21.259, 27.8988, -14.108],
    [20.7689, -16.53147, 0, 0], [17.70732, -13.50652, 0, 0],
    [15.24213, -11.08552, 0, 0], [5.7502, -1.2742, 0, 0],
    [6.706231, -2.248585, 0, 0], [3.75, 0, 0, 0], [3.36, 0, 0, 0],
]
_IASP91_QMU = [84.6, -1, 312, 312, 312, 143, 143, 80, 600, 600, 600]

_AK135_RMIN = [0, 1217.5, 3479.5, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351]
_AK135_RMAX = [1217.5, 3479.5, 3631, 5611, 5711, 5961, 6161, 6251, 6336, 6351, 6371]
_AK135_RHO = [
    [13.01224, -0.00072, -8.448571, 0], [12.27867, 1.206494, -10.135214, 0],
    [5.520665, -0.172417, 0, 0], [9.404821, -14.092113, 17.721033, -9.221153],
    [10.084566, -6.409226, 0, 0], [11.384761, -8.109009, 0, 0],
    [11.916663, -8.811093, 0, 0], [9.878741, -6.703708, 0, 0],
    [3.573402, -0.277326, 0, 0], [2.7142, 0, 0, 0], [2.449, 0, 0, 0],
]
_AK135_VP = [
    [11.261692, 0.028794, -6.627846, 0], [10.118851, 3.457774, -13.434875, 0],
    [13.908244, -0.45417, 0, 0], [24.138794, -37.097655, 46.631994, -24.272115],
    [25.969838, -16.934118, 0, 0], [29.38896, -21.40656, 0, 0],
    [30.78765, -23.25415, 0, 0], [25.413889, -17.697222, 0, 0],
    [8.785412, -0.749529, 0, 0], [6.5, 0, 0, 0], [5.8, 0, 0, 0],
]
_AK135_VS = [
    [3.667865, -0.001345, -4.440915, 0], [0, 0, 0, 0],
    [8.018341, -1.349895, 0, 0], [12.213901, -18.573085, 24.557329, -12.728015],
    [20.208945, -15.895645, 0, 0], [17.71732, -13.50652, 0, 0],
    [15.212335, -11.053685, 0, 0], [5.7502, -1.2742, 0, 0],
    [5.970824, -1.499059, 0, 0], [3.85, 0, 0, 0], [3.46, 0, 0, 0],
]
_AK135_QMU = [84.6, -1, 312, 312, 312, 143, 143, 80, 600, 600, 600]


def _layers(rmin, rmax, rho, vpv, vph, vsv, vsh, eta, qmu, qkappa):
    return [
        {
            'r_min': float(rmin[i]),
            'r_max': float(rmax[i]),
            'rho': list(rho[i]),
            'vpv': list(vpv[i]),
            'vph': list(vph[i]),
            'vsv': list(vsv[i]),
            'vsh': list(vsh[i]),
            'eta': list(eta[i]),
            'q_mu': float(qmu[i]),
            'q_kappa': float(qkappa[i]),
        }
        for i in range(len(rmin))
    ]


def _isotropic_eta(n):
    return [[1, 0, 0, 0]] * n


def prem() -> Dict[str, Any]:
    """Transversely isotropic PREM."""
    return {
        'name': 'PREM',
        'layers': _layers(
            _PREM_RMIN, _PREM_RMAX, _PREM_RHO, _PREM_VPV, _PREM_VPH,
            _PREM_VSV, _PREM_VSH, _PREM_ETA, _PREM_QMU, _PREM_QKAPPA,
        ),
    }


def iprem() -> Dict[str, Any]:
    """Isotropic PREM."""
    vp = [list(c) for c in _PREM_VPV]
    vs = [list(c) for c in _PREM_VSV]
    for i in (8, 9):
        vp[i] = list(_IPREM_LVZ_VP)
        vs[i] = list(_IPREM_LVZ_VS)
    return {
        'name': 'IPREM',
        'layers': _layers(
            _PREM_RMIN, _PREM_RMAX, _PREM_RHO, vp, vp, vs, vs,
            _isotropic_eta(len(_PREM_RMIN)), _PREM_QMU, _PREM_QKAPPA,
        ),
    }


def iasp91() -> Dict[str, Any]:
    """IASP91 (no density model of its own: PREM density is used)."""
    n = len(_IASP91_RMIN)
    return {
        'name': 'IASP91',
        'layers': _layers(
            _IASP91_RMIN, _IASP91_RMAX, _IASP91_RHO, _IASP91_VP, _IASP91_VP,
            _IASP91_VS, _IASP91_VS, _isotropic_eta(n), _IASP91_QMU,
            [1327.7] + [57823] * (n - 1),
        ),
    }


def ak135() -> Dict[str, Any]:
    """AK135."""
    n = len(_AK135_RMIN)
    return {
        'name': 'AK135',
        'layers': _layers(
            _AK135_RMIN, _AK135_RMAX, _AK135_RHO, _AK135_VP, _AK135_VP,
            _AK135_VS, _AK135_VS, _isotropic_eta(n), _AK135_QMU,
            [1327.7] + [57823] * (n - 1),
        ),
    }


STANDARD_MODELS = {
    'prem': prem,
    'iprem': iprem,
    'iasp91': iasp91,
    'ak135': ak135,
}
