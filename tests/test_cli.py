import pytest

from freightrail.__main__ import create_argument_parser, main


def test_routes_command(capsys):
    assert main(["routes", "CHI", "KC"]) == 0
    out = capsys.readouterr().out
    assert "#1  CHI → KC" in out
    assert "500 mi" in out


def test_routes_same_station(capsys):
    assert main(["routes", "CHI", "CHI"]) == 0
    assert "No routes found" in capsys.readouterr().out


def test_unknown_station_exit_code(capsys):
    assert main(["routes", "CHI", "XYZ"]) == 1
    assert 'Station "XYZ" not found' in capsys.readouterr().err


def test_cars_command(capsys):
    assert main(["cars", "--length", "40", "--width", "8", "--height", "10", "--weight", "50000",
                 "--operators", "BNSF"]) == 0
    out = capsys.readouterr().out
    assert "bnsf_boxcar" in out
    assert "bnsf_flatcar" not in out


def test_comply_command(capsys):
    args = ["comply", "CHI", "KC", "--length", "40", "--width", "8", "--height", "10",
            "--weight", "50000", "--car-id", "bnsf_boxcar"]
    assert main(args) == 0
    assert "Compliance probability: 99% (High)" in capsys.readouterr().out


def test_comply_unknown_car(capsys):
    args = ["comply", "CHI", "KC", "--length", "40", "--width", "8", "--height", "10",
            "--weight", "50000", "--car-id", "magic_carpet"]
    assert main(args) == 1


def test_estimate_command(capsys):
    assert main(["estimate", "CHI", "KC", "--weight", "100000", "--season", "summer"]) == 0
    out = capsys.readouterr().out
    assert "cost $1,062.50" in out
    assert "transit 20.7 hours" in out


def test_bad_operator_is_invalid_input(capsys):
    assert main(["routes", "CHI", "KC", "--avoid", "NOT_A_RAILROAD"]) == 1


def test_config_file(tmp_path, capsys):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("max_routes: 1\n")
    assert main(["--config", str(cfg), "routes", "SEA", "CHI"]) == 0
    out = capsys.readouterr().out
    assert "#1" in out and "#2" not in out


def test_invalid_config(tmp_path, capsys):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text("max_routes: 0\n")
    assert main(["--config", str(cfg), "routes", "CHI", "KC"]) == 1


def test_usage_error_exits_2():
    with pytest.raises(SystemExit) as exc:
        create_argument_parser().parse_args(["routes"])
    assert exc.value.code == 2
