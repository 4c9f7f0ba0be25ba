"""Tests for planetray.phase: phase-name grammar and polarization."""

import pickle

import pytest

from planetray import BoundaryAction, MalformedPhaseError, PhaseName, WaveType, Zone

A = BoundaryAction


def _actions(text, psv=None):
    return [leg.action for leg in PhaseName.parse(text, psv).legs]


class TestGrammar:
    @pytest.mark.parametrize("text,actions", [
        ("P", [A.TURN, A.END]),
        ("p", [A.END]),
        ("pP", [A.SURFACE_REFLECTION, A.TURN, A.END]),
        ("PP", [A.TURN, A.SURFACE_REFLECTION, A.TURN, A.END]),
        ("PcP", [A.CMB_REFLECTION, A.END]),
        ("ScS", [A.CMB_REFLECTION, A.END]),
        ("PKP", [A.TRANSMISSION, A.TURN, A.TRANSMISSION, A.END]),
        ("SKKS", [A.TRANSMISSION, A.TURN, A.UNDERSIDE_REFLECTION, A.TURN, A.TRANSMISSION, A.END]),
        ("PKiKP", [A.TRANSMISSION, A.ICB_REFLECTION, A.TRANSMISSION, A.END]),
        ("PKIKP", [A.TRANSMISSION, A.TRANSMISSION, A.TURN, A.TRANSMISSION, A.TRANSMISSION, A.END]),
        ("PKJKP", [A.TRANSMISSION, A.TRANSMISSION, A.TURN, A.TRANSMISSION, A.TRANSMISSION, A.END]),
        ("PKIIKP", [A.TRANSMISSION, A.TRANSMISSION, A.TURN, A.UNDERSIDE_REFLECTION, A.TURN,
                    A.TRANSMISSION, A.TRANSMISSION, A.END]),
        ("Pdiff", [A.DIFFRACTION, A.END]),
        ("sSdiff", [A.SURFACE_REFLECTION, A.DIFFRACTION, A.END]),
    ])
    def test_leg_actions(self, text, actions):
        assert _actions(text) == actions

    def test_zones_and_waves(self):
        phase = PhaseName.parse("PKJKP")
        zones = [leg.zone for leg in phase.legs]
        assert zones == [Zone.MANTLE, Zone.OUTER_CORE, Zone.INNER_CORE, Zone.INNER_CORE,
                         Zone.OUTER_CORE, Zone.MANTLE]
        assert phase.legs[2].wave is WaveType.SV
        assert phase.uses_core
        assert (Zone.INNER_CORE, WaveType.SV) in phase.zone_waves()

    def test_directions(self):
        phase = PhaseName.parse("PcS")
        assert [leg.is_upgoing for leg in phase.legs] == [False, True]
        assert phase.legs[1].wave is WaveType.SV

    @pytest.mark.parametrize("text", [
        "P", "pP", "sS", "PP", "PcP", "ScS", "ScSScS", "PKP", "SKS", "SKKS",
        "PKiKP", "PKIKP", "PKJKP", "PKIIKP", "Pdiff", "Sdiff12.5", "pPdiff30.0",
    ])
    def test_canonical_text_round_trip(self, text):
        phase = PhaseName.parse(text)
        assert str(phase) == text
        assert PhaseName.parse(str(phase), phase.is_psv) == phase

    @pytest.mark.parametrize("text", [
        "", "X", "Pc", "cP", "KP", "PK", "PKiP", "PiKP", "PcK", "PpP",
        "Pdiffdiff", "PdiffPdiff", "Kdiff", "PcdiffP", "PI", "PKI",
    ])
    def test_malformed(self, text):
        with pytest.raises(MalformedPhaseError):
            PhaseName.parse(text)

    def test_malformed_error_carries_name(self):
        with pytest.raises(MalformedPhaseError) as info:
            PhaseName.parse("PXP")
        assert info.value.phase_name == "PXP"
        assert isinstance(info.value, ValueError)


class TestPolarization:
    def test_inferred_psv_for_p_type(self):
        assert PhaseName.parse("SKS").is_psv
        assert PhaseName.parse("PS").is_psv

    def test_inferred_sh_for_pure_s(self):
        phase = PhaseName.parse("ScS")
        assert not phase.is_psv
        assert all(leg.wave is WaveType.SH for leg in phase.legs)

    def test_explicit_sv(self):
        phase = PhaseName.parse("S", psv=True)
        assert all(leg.wave is WaveType.SV for leg in phase.legs)

    def test_sh_with_p_type_rejected(self):
        with pytest.raises(MalformedPhaseError, match="P-SV"):
            PhaseName.parse("SKS", psv=False)

    def test_polarization_distinguishes_phases(self):
        assert PhaseName.parse("S", psv=True) != PhaseName.parse("S", psv=False)

    def test_display_name(self):
        assert PhaseName.parse("sS", psv=True).display_name == "svSV"
        assert PhaseName.parse("ScS", psv=False).display_name == "SHcSH"


class TestDiffraction:
    def test_angle_parsed(self):
        phase = PhaseName.parse("Pdiff12.5")
        assert phase.is_diffracted
        assert phase.diffraction_angle == pytest.approx(12.5)
        assert phase.diffracted_leg.action is BoundaryAction.DIFFRACTION

    def test_with_diffraction_angle_round_trip(self):
        phase = PhaseName.parse("Sdiff", psv=True).with_diffraction_angle(7.25)
        assert str(phase) == "Sdiff7.25"
        assert phase.is_psv
        assert PhaseName.parse(str(phase), phase.is_psv) == phase

    def test_tiny_angle_round_trip(self):
        phase = PhaseName.parse("Pdiff").with_diffraction_angle(1e-5)
        assert phase.diffraction_angle == pytest.approx(1e-5)
        assert PhaseName.parse(str(phase)) == phase

    def test_zero_angle_is_plain_diff(self):
        assert str(PhaseName.parse("Pdiff3").with_diffraction_angle(0.0)) == "Pdiff"

    @pytest.mark.parametrize("angle", [-1.0, float("inf"), float("nan")])
    def test_invalid_angle(self, angle):
        with pytest.raises(ValueError):
            PhaseName.parse("Pdiff").with_diffraction_angle(angle)

    def test_non_diffracted_phase(self):
        phase = PhaseName.parse("P")
        assert phase.diffraction_angle == 0.0
        assert phase.without_diffraction() is phase
        with pytest.raises(ValueError):
            phase.with_diffraction_angle(5.0)

    def test_without_diffraction(self):
        assert str(PhaseName.parse("pPdiff4").without_diffraction()) == "pP"


class TestValueSemantics:
    def test_create_is_cached(self):
        assert PhaseName.create("PKiKP") is PhaseName.create("PKiKP")

    def test_hashable(self):
        phases = {PhaseName.parse("P"), PhaseName.parse("P"), PhaseName.parse("PP")}
        assert len(phases) == 2

    def test_pickle(self):
        phase = PhaseName.parse("SKS", psv=True)
        assert pickle.loads(pickle.dumps(phase)) == phase

    def test_iteration_and_length(self):
        phase = PhaseName.parse("PcP")
        assert len(phase) == 2
        assert list(phase) == list(phase.legs)
