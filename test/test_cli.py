import pytest

from main import build_parser, main


def test_sweep_writes_frames(tmp_path):
    out = tmp_path / "frames"
    code = main([
        "--settings", str(tmp_path / "settings.json"),
        "--output-dir", str(out),
        "sweep", "--ra-min", "10", "--ra-max", "14", "--dec-min", "5", "--frames", "3",
    ])

    assert code == 0
    assert sorted(p.name for p in out.glob("frame_0*.png")) == [
        "frame_0000.png", "frame_0001.png", "frame_0002.png",
    ]


def test_pipeline_command(tmp_path):
    plot = tmp_path / "single.png"
    code = main([
        "--settings", str(tmp_path / "settings.json"),
        "pipeline", "--ra", "30", "--dec", "-10", "--plot-raw-input", str(plot),
    ])

    assert code == 0
    assert plot.exists()


def test_subcommand_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
