"""
Tests for simple_mc.config module.
"""
import pytest

from simple_mc.config import Parameters, parse_params, set_param
from simple_mc.errors import ParameterError


class TestDefaults:
    def test_reference_defaults(self):
        p = Parameters()
        assert p.n_particles == 10000
        assert p.n_batches == 20
        assert p.n_active == 10
        assert p.n_generations == 1
        assert p.n_bins == 10
        assert p.bc == 'reflect'
        assert (p.nu, p.xs_f, p.xs_a, p.xs_s) == (1.5, 2.29, 3.42, 2.29)
        assert p.n_inactive == 10

    def test_defaults_validate(self):
        Parameters().validate()


class TestValidate:
    @pytest.mark.parametrize("field, value", [
        ('n_particles', 0),
        ('n_batches', 0),
        ('n_generations', 0),
        ('n_bins', 0),
        ('n_workers', 0),
        ('n_active', 21),
        ('n_active', -1),
        ('gx', 0.0),
        ('bc', 'mirror'),
        ('xs_f', 5.0),
    ])
    def test_rejects_bad_values(self, field, value):
        p = Parameters()
        setattr(p, field, value)
        with pytest.raises(ParameterError):
            p.validate()

    def test_output_switch_needs_file(self):
        p = Parameters(write_keff=True)
        with pytest.raises(ParameterError):
            p.validate()

    def test_parameter_error_is_value_error(self):
        with pytest.raises(ValueError):
            Parameters(n_particles=0).validate()


class TestParseParams:
    def test_reads_key_value_file(self, tmp_path):
        path = tmp_path / "parameters"
        path.write_text(
            "# run size\n"
            "particles 500\n"
            "batches   12   # trailing comment\n"
            "active 6\n"
            "\n"
            "bc vacuum\n"
            "tally true\n"
            "seed 7\n"
            "gx 25.5\n"
            "entropy_file entropy.dat\n"
        )
        p = parse_params(str(path))
        assert p.n_particles == 500
        assert p.n_batches == 12
        assert p.n_active == 6
        assert p.bc == 'vacuum'
        assert p.tally is True
        assert p.seed == 7
        assert p.gx == pytest.approx(25.5)
        assert p.entropy_file == 'entropy.dat'
        assert p.write_entropy is True
        p.validate()

    def test_updates_given_params(self, tmp_path):
        path = tmp_path / "parameters"
        path.write_text("n_bins 4\n")
        base = Parameters(n_particles=42)
        p = parse_params(str(path), base)
        assert p is base
        assert p.n_bins == 4
        assert p.n_particles == 42

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "parameters"
        path.write_text("colour blue\n")
        with pytest.raises(ParameterError):
            parse_params(str(path))

    def test_bad_value(self):
        with pytest.raises(ParameterError):
            set_param(Parameters(), 'particles', 'many')

    def test_missing_value(self, tmp_path):
        path = tmp_path / "parameters"
        path.write_text("particles\n")
        with pytest.raises(ParameterError):
            parse_params(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ParameterError):
            parse_params(str(tmp_path / "nope"))


class TestSourceFileSwitches:
    def test_source_file_does_not_switch_on_write_source(self, tmp_path):
        path = tmp_path / "parameters"
        path.write_text("load_source true\nsource_file source.dat\n")
        p = parse_params(str(path))
        assert p.load_source is True
        assert p.write_source is False
        p.validate()

    def test_write_source_named_explicitly(self, tmp_path):
        path = tmp_path / "parameters"
        path.write_text("write_source true\nsource_file source.dat\n")
        p = parse_params(str(path))
        assert p.write_source is True
        p.validate()

    @pytest.mark.parametrize("other", ['load_source', 'save_source'])
    def test_write_source_conflicts_with_shared_file(self, other):
        p = Parameters(write_source=True, source_file='source.dat')
        setattr(p, other, True)
        with pytest.raises(ParameterError):
            p.validate()
