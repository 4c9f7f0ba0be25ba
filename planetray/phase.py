"""
Seismic phase names.

A phase name such as ``PKiKP`` or ``Sdiff12.5`` is parsed into an ordered
tuple of :class:`Leg` values. Each leg is one straight pass through a zone
(downward or upward) together with what happens at its end: a turn, a
reflection, a transmission, a diffraction along the core-mantle boundary,
or the arrival at the surface.

Symbols
-------
=========  =====================================================
``p s``    upgoing P / S leg from the source (first symbol only)
``P S``    P / S leg in the mantle
``K``      P leg in the fluid outer core
``I J``    P / S leg in the inner core
``c``      reflection at the core-mantle boundary
``i``      reflection at the inner-core boundary
``diff``   diffraction along the core-mantle boundary, written after a
           downgoing mantle leg and optionally followed by the extra
           arc in degrees (``Pdiff``, ``Sdiff7.5``)
=========  =====================================================
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterator, List, Optional, Set, Tuple

from .constants import BoundaryAction, WaveType, Zone
from .exceptions import MalformedPhaseError

_SYMBOL = re.compile(r'diff(\d+(?:\.\d*)?(?:[eE][+-]?\d+)?)?|[psPSKIJci]')

_MANTLE = ('P', 'S')
_P_TYPE = set('pPKIJi')


@dataclass(frozen=True)
class Leg:
    """
    One pass of a ray through a zone.

    Attributes
    ----------
    token : str
        'P', 'S', 'K', 'I' or 'J'.
    zone : Zone
    wave : WaveType
    is_upgoing : bool
    action : BoundaryAction
        What happens at the end of the leg.
    diffraction_angle : float
        Arc in degrees travelled along the core-mantle boundary; only
        meaningful when ``action`` is ``DIFFRACTION``.
    """

    token: str
    zone: Zone
    wave: WaveType
    is_upgoing: bool
    action: BoundaryAction
    diffraction_angle: float = 0.0

    def __str__(self) -> str:
        direction = 'up' if self.is_upgoing else 'down'
        text = f"{self.token}({self.wave.value}) {direction} -> {self.action.value}"
        if self.action is BoundaryAction.DIFFRACTION:
            text += f" {self.diffraction_angle!r} deg"
        return text


def _format_angle(angle: float) -> str:
    return '' if angle == 0 else repr(float(angle))


class PhaseName:
    """
    An immutable, parsed seismic phase.

    Use :meth:`parse` or the cached :meth:`create` rather than the
    constructor. Two phases are equal when their legs and polarization are
    equal, whatever literal text they came from.

    Examples
    --------
    >>> phase = PhaseName.create('PKiKP')
    >>> [leg.action.value for leg in phase.legs]
    ['transmission', 'icb_reflection', 'transmission', 'end']
    >>> str(PhaseName.create('Pdiff12.5'))
    'Pdiff12.5'
    """

    __slots__ = ('_legs', '_is_psv', '_text')

    def __init__(self, legs: Tuple[Leg, ...], is_psv: bool):
        self._legs = tuple(legs)
        self._is_psv = bool(is_psv)
        self._text = self._compose()

    @classmethod
    def parse(cls, text: str, psv: Optional[bool] = None) -> 'PhaseName':
        """
        Parse a phase name.

        Parameters
        ----------
        text : str
            Phase name, e.g. 'ScS', 'PKIKP', 'Pdiff20.0'.
        psv : bool, optional
            Requested polarization. None infers P-SV when the name contains
            a P-type symbol (p, P, K, I, J, i) and SH otherwise.

        Raises
        ------
        MalformedPhaseError
            If the text is not a valid phase, or ``psv`` is False while the
            phase contains P-type legs.
        """
        if not isinstance(text, str):
            raise MalformedPhaseError(str(text), "phase name must be a string")
        symbols = _tokenize(text)

        has_p_type = any(symbol in _P_TYPE for symbol, _ in symbols)
        if psv is None:
            psv = has_p_type
        elif not psv and has_p_type:
            raise MalformedPhaseError(
                text, "P-type legs (p, P, K, I, J, i) require P-SV polarization"
            )
        return cls(_build_legs(text, symbols, psv), psv)

    @classmethod
    def create(cls, text: str, psv: Optional[bool] = None) -> 'PhaseName':
        """Cached :meth:`parse`."""
        return _create(text, psv)

    # ========== Value Semantics ========== #

    @property
    def legs(self) -> Tuple[Leg, ...]:
        return self._legs

    @property
    def is_psv(self) -> bool:
        return self._is_psv

    def __iter__(self) -> Iterator[Leg]:
        return iter(self._legs)

    def __len__(self) -> int:
        return len(self._legs)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PhaseName):
            return NotImplemented
        return self._legs == other._legs and self._is_psv == other._is_psv

    def __hash__(self) -> int:
        return hash((self._legs, self._is_psv))

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"PhaseName({self._text!r}, psv={self._is_psv})"

    def __reduce__(self):
        return (_create, (self._text, self._is_psv))

    def _compose(self) -> str:
        out: List[str] = []
        previous: Optional[Leg] = None
        for k, leg in enumerate(self._legs):
            if leg.zone is Zone.MANTLE:
                if not leg.is_upgoing:
                    out.append(leg.token)
                    if leg.action is BoundaryAction.DIFFRACTION:
                        out.append('diff' + _format_angle(leg.diffraction_angle))
                    elif leg.action is BoundaryAction.CMB_REFLECTION:
                        out.append('c')
                elif k == 0:
                    out.append(leg.token.lower())
                elif previous.zone is Zone.OUTER_CORE or previous.action is BoundaryAction.CMB_REFLECTION:
                    out.append(leg.token)
            elif leg.zone is Zone.OUTER_CORE:
                if not leg.is_upgoing:
                    out.append('K')
                    if leg.action is BoundaryAction.ICB_REFLECTION:
                        out.append('i')
                elif previous.zone is Zone.INNER_CORE or previous.action is BoundaryAction.ICB_REFLECTION:
                    out.append('K')
            elif not leg.is_upgoing:
                out.append(leg.token)
            previous = leg
        return ''.join(out)

    # ========== Description ========== #

    @property
    def display_name(self) -> str:
        """Name with S legs shown as SV or SH."""
        polarization = 'V' if self._is_psv else 'H'
        return self._text.replace('S', 'S' + polarization).replace('s', 's' + polarization.lower())

    @property
    def zones(self) -> Set[Zone]:
        return {leg.zone for leg in self._legs}

    def zone_waves(self) -> Set[Tuple[Zone, WaveType]]:
        """All (zone, wave) pairs travelled by the phase."""
        return {(leg.zone, leg.wave) for leg in self._legs}

    @property
    def uses_core(self) -> bool:
        return any(leg.zone is not Zone.MANTLE for leg in self._legs)

    # ========== Diffraction ========== #

    @property
    def is_diffracted(self) -> bool:
        return any(leg.action is BoundaryAction.DIFFRACTION for leg in self._legs)

    @property
    def diffracted_leg(self) -> Optional[Leg]:
        for leg in self._legs:
            if leg.action is BoundaryAction.DIFFRACTION:
                return leg
        return None

    @property
    def diffraction_angle(self) -> float:
        """Diffraction arc in degrees (0 for non-diffracted phases)."""
        leg = self.diffracted_leg
        return leg.diffraction_angle if leg is not None else 0.0

    def with_diffraction_angle(self, angle: float) -> 'PhaseName':
        """
        The same phase with its diffraction arc set to ``angle`` degrees.

        The new phase is synthesized from text, so
        ``PhaseName.parse(str(result), result.is_psv) == result``.

        Raises
        ------
        ValueError
            If the phase is not diffracted or ``angle`` is negative or not
            finite.
        """
        if not self.is_diffracted:
            raise ValueError(f"Phase '{self}' has no diffracted leg")
        angle = float(angle)
        if not angle >= 0 or angle == float('inf'):
            raise ValueError(f"Diffraction angle must be finite and non-negative, got {angle}")
        text = re.sub(r'diff[0-9.eE+-]*', 'diff' + _format_angle(angle), self._text, count=1)
        return _create(text, self._is_psv)

    def without_diffraction(self) -> 'PhaseName':
        """The phase with its 'diff' suffix removed (e.g. Pdiff -> P)."""
        if not self.is_diffracted:
            return self
        text = re.sub(r'diff[0-9.eE+-]*', '', self._text, count=1)
        return _create(text, self._is_psv)


@lru_cache(maxsize=1024)
def _create(text: str, psv: Optional[bool]) -> PhaseName:
    return PhaseName.parse(text, psv)


def _tokenize(text: str) -> List[List]:
    """Split text into [symbol, diffraction angle or None] pairs."""
    symbols: List[List] = []
    pos = 0
    while pos < len(text):
        match = _SYMBOL.match(text, pos)
        if match is None:
            raise MalformedPhaseError(text, f"unrecognized symbol at position {pos}: {text[pos:]!r}")
        if match.group(0).startswith('diff'):
            if not symbols or symbols[-1][0] not in _MANTLE:
                raise MalformedPhaseError(text, "'diff' must follow P or S")
            if symbols[-1][1] is not None:
                raise MalformedPhaseError(text, "repeated 'diff'")
            symbols[-1][1] = float(match.group(1)) if match.group(1) else 0.0
        else:
            symbols.append([match.group(0), None])
        pos = match.end()
    if not symbols:
        raise MalformedPhaseError(text, "empty phase name")
    return symbols


def _build_legs(text: str, symbols: List[List], psv: bool) -> Tuple[Leg, ...]:
    if symbols[0][0] not in ('p', 's', 'P', 'S'):
        raise MalformedPhaseError(text, "a phase must start in the mantle")
    if symbols[-1][0] not in ('p', 's', 'P', 'S'):
        raise MalformedPhaseError(text, "a phase must end with a mantle leg")
    if sum(angle is not None for _, angle in symbols) > 1:
        raise MalformedPhaseError(text, "only one diffracted leg is supported")

    s_wave = WaveType.SV if psv else WaveType.SH

    def wave_of(symbol: str) -> WaveType:
        if symbol in ('p', 'P', 'K', 'I'):
            return WaveType.P
        if symbol == 'J':
            return WaveType.SV
        return s_wave

    def surface_action(nxt: Optional[str]) -> BoundaryAction:
        if nxt is None:
            return BoundaryAction.END
        if nxt in _MANTLE:
            return BoundaryAction.SURFACE_REFLECTION
        raise MalformedPhaseError(text, f"an upgoing mantle leg cannot be followed by '{nxt}'")

    def cmb_exit(nxt: Optional[str]) -> BoundaryAction:
        if nxt in _MANTLE:
            return BoundaryAction.TRANSMISSION
        if nxt == 'K':
            return BoundaryAction.UNDERSIDE_REFLECTION
        raise MalformedPhaseError(text, "an outer-core leg must leave upward into P, S or K")

    legs: List[Leg] = []
    previous: Optional[str] = None
    n = len(symbols)
    for k, (symbol, angle) in enumerate(symbols):
        nxt = symbols[k + 1][0] if k + 1 < n else None
        wave = wave_of(symbol)

        if symbol in ('p', 's'):
            if k != 0:
                raise MalformedPhaseError(text, f"'{symbol}' is only allowed as the first symbol")
            legs.append(Leg(symbol.upper(), Zone.MANTLE, wave, True, surface_action(nxt)))

        elif symbol in _MANTLE:
            if previous in ('K', 'c'):
                if angle is not None:
                    raise MalformedPhaseError(text, "'diff' must follow a downgoing mantle leg")
                legs.append(Leg(symbol, Zone.MANTLE, wave, True, surface_action(nxt)))
            elif nxt in ('c', 'K'):
                if angle is not None:
                    raise MalformedPhaseError(text, "a diffracted leg cannot enter the core")
                action = BoundaryAction.CMB_REFLECTION if nxt == 'c' else BoundaryAction.TRANSMISSION
                legs.append(Leg(symbol, Zone.MANTLE, wave, False, action))
            elif angle is not None:
                legs.append(Leg(symbol, Zone.MANTLE, wave, False, BoundaryAction.DIFFRACTION, angle))
                legs.append(Leg(symbol, Zone.MANTLE, wave, True, surface_action(nxt)))
            else:
                legs.append(Leg(symbol, Zone.MANTLE, wave, False, BoundaryAction.TURN))
                legs.append(Leg(symbol, Zone.MANTLE, wave, True, surface_action(nxt)))

        elif symbol == 'c':
            if previous not in _MANTLE or legs[-1].action is not BoundaryAction.CMB_REFLECTION:
                raise MalformedPhaseError(text, "'c' must follow a downgoing P or S")
            if nxt not in _MANTLE:
                raise MalformedPhaseError(text, "'c' must be followed by P or S")

        elif symbol == 'K':
            if previous in _MANTLE or previous == 'K':
                if nxt in ('I', 'J'):
                    legs.append(Leg('K', Zone.OUTER_CORE, wave, False, BoundaryAction.TRANSMISSION))
                elif nxt == 'i':
                    legs.append(Leg('K', Zone.OUTER_CORE, wave, False, BoundaryAction.ICB_REFLECTION))
                else:
                    legs.append(Leg('K', Zone.OUTER_CORE, wave, False, BoundaryAction.TURN))
                    legs.append(Leg('K', Zone.OUTER_CORE, wave, True, cmb_exit(nxt)))
            elif previous in ('I', 'J', 'i'):
                legs.append(Leg('K', Zone.OUTER_CORE, wave, True, cmb_exit(nxt)))
            else:
                raise MalformedPhaseError(text, f"'K' cannot follow '{previous}'")

        elif symbol == 'i':
            if previous != 'K' or legs[-1].action is not BoundaryAction.ICB_REFLECTION:
                raise MalformedPhaseError(text, "'i' must follow a downgoing K")
            if nxt != 'K':
                raise MalformedPhaseError(text, "'i' must be followed by K")

        else:  # I, J
            if previous not in ('K', 'I', 'J'):
                raise MalformedPhaseError(text, f"'{symbol}' must follow K, I or J")
            legs.append(Leg(symbol, Zone.INNER_CORE, wave, False, BoundaryAction.TURN))
            if nxt in ('I', 'J'):
                action = BoundaryAction.UNDERSIDE_REFLECTION
            elif nxt == 'K':
                action = BoundaryAction.TRANSMISSION
            else:
                raise MalformedPhaseError(text, f"'{symbol}' must be followed by K, I or J")
            legs.append(Leg(symbol, Zone.INNER_CORE, wave, True, action))

        previous = symbol
    return tuple(legs)
