import json

import pytest

from daynightmap.cli import main


def test_svg_output(tmp_path, capsys):
    out = tmp_path / "map.svg"
    code = main(
        [
            "--projection", "equirectangular",
            "--width", "200",
            "--height", "100",
            "--timestamp", "1704888000",
            "--format", "svg",
            "--output", str(out),
            "--lat", "48.85",
            "--lng", "2.35",
            "--json",
        ]
    )
    assert code == 0
    assert out.read_text(encoding="utf-8").startswith("<svg")
    summary = json.loads(capsys.readouterr().out.splitlines()[0])
    assert summary["instant"] == "2024-01-10T12:00:00+00:00"
    assert summary["sunrise"] is not None


def test_html_output(tmp_path):
    out = tmp_path / "map.html"
    code = main(["--timestamp", "1704888000", "--format", "html", "--lang", "ko", "--output", str(out)])
    assert code == 0
    assert "현재 UTC 시각" in out.read_text(encoding="utf-8")


@pytest.mark.parametrize(
    "argv",
    [
        ["--lat", "95", "--lng", "0"],
        ["--lat", "10"],
        ["--projection", "robinson"],
        ["--stride", "0"],
    ],
)
def test_bad_arguments_exit_2(argv, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(argv + ["--format", "svg", "--output", str(tmp_path / "x.svg")])
    assert excinfo.value.code == 2


def test_place_conflicts_with_coordinates(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--place", "Seoul", "--lat", "1", "--lng", "2", "--output", str(tmp_path / "x.png")])
    assert excinfo.value.code == 2


def test_default_output_lands_in_working_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    common = ["--timestamp", "1704888000", "--width", "200", "--height", "100"]
    assert main(common + ["--format", "svg"]) == 0
    assert main(common + ["--format", "png"]) == 0
    assert main(common + ["--format", "html", "--minimal"]) == 0
    names = sorted(p.name for p in (tmp_path / "results").iterdir())
    assert names == [
        "daynight__mercator__2024_01_10_12_00.html",
        "daynight__mercator__2024_01_10_12_00.png",
        "daynight__mercator__2024_01_10_12_00.svg",
    ]
    html_page = (tmp_path / "results" / names[0]).read_text(encoding="utf-8")
    assert 'class="legend"' not in html_page
