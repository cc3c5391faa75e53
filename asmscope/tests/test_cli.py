import json
from click.testing import CliRunner
from asmscope import __version__
from asmscope._cli import run_script
from asmscope.viewer import DataHolder


IN_FP = "asmscope/tests/input/three_components.gml"


def test_no_args_shows_help():
    result = CliRunner().invoke(run_script, [])
    assert "Usage:" in result.output
    assert "--graph" in result.output


def test_version():
    result = CliRunner().invoke(run_script, ["-v"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_run_without_layout(tmp_path):
    out_fp = tmp_path / "out.json"
    tsv_fp = tmp_path / "ccstats.tsv"
    result = CliRunner().invoke(
        run_script,
        [
            "-g",
            IN_FP,
            "-o",
            str(out_fp),
            "--tsv",
            str(tsv_fp),
            "--no-layout",
        ],
    )
    assert result.exit_code == 0, result.output
    data = json.loads(out_fp.read_text())
    assert len(data["components"]) == 3
    assert data["input_file_basename"] == "three_components.gml"

    dh = DataHolder(data)
    assert dh.find_component_containing_node_name("e") == 2
    assert dh.get_pattern_info(8).node_ids == [1, 2]

    lines = tsv_fp.read_text().splitlines()
    assert len(lines) == 4
    assert lines[1].split("\t")[:4] == ["1", "4", "0", "4"]


def test_missing_graph(tmp_path):
    result = CliRunner().invoke(
        run_script,
        ["-g", "asmscope/tests/input/nope.gml", "-o", str(tmp_path / "o")],
    )
    assert result.exit_code != 0
    assert "does not exist" in result.output


def test_bad_maxn(tmp_path):
    result = CliRunner().invoke(
        run_script,
        ["-g", IN_FP, "-o", str(tmp_path / "o"), "--maxn", "0"],
    )
    assert result.exit_code != 0
    assert "--maxn" in result.output
