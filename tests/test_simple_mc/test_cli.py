"""
Tests for simple_mc.cli module.
"""
import json

from simple_mc.cli import main


class TestCli:
    def test_small_run_writes_json(self, tmp_path):
        out = tmp_path / "results" / "run.json"
        status = main([
            '-n', '50', '-b', '3', '-a', '2', '--bins', '3', '--seed', '4',
            '--workers', '2', '--quiet', '--output', str(out),
        ])
        assert status == 0
        data = json.loads(out.read_text())
        assert data['n_particles'] == 50
        assert len(data['keff_active']) == 2

    def test_params_file(self, tmp_path, capsys):
        params = tmp_path / "parameters"
        params.write_text("particles 40\nbatches 2\nactive 1\nnuclides 2\n")
        assert main(['--params', str(params)]) == 0
        out = capsys.readouterr().out
        assert "INPUT SUMMARY" in out
        assert "k-Eigenvalue Result" in out

    def test_invalid_parameters_exit_status(self, capsys):
        assert main(['-b', '2', '-a', '5', '--quiet']) == 1
        assert "ERROR" in capsys.readouterr().err

    def test_list_backends(self, capsys):
        assert main(['--list-backends']) == 0
        assert "CPU" in capsys.readouterr().out
