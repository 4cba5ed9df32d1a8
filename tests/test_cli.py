import os

from matcalc_diagrams import _common
from matcalc_diagrams.__main__ import FIGURES, main, match_figure


def test_list(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    assert "chainrule_num" in out
    assert "big_conv_jacobian  (png only)" in out
    assert f"{len(FIGURES)} figures total." in out


def test_unknown_figure(capsys, tmp_path):
    assert main(["--figure", "nope", "--output-dir", str(tmp_path)]) == 1
    assert "No figure registered as 'nope'" in capsys.readouterr().out
    assert os.listdir(tmp_path) == []


def test_generate_selected(capsys, tmp_path):
    status = main(
        [
            "--figure",
            "sparse_matrix",
            "--figure",
            "coloring.svg",
            "--format",
            "png",
            "--output-dir",
            str(tmp_path),
        ]
    )
    assert status == 0
    assert sorted(os.listdir(tmp_path)) == ["coloring.png", "sparse_matrix.png"]
    assert "Generated 2 figure(s)." in capsys.readouterr().out


def test_match_figure():
    assert match_figure("chainrule") == "chainrule"
    assert match_figure(" Chainrule ") == "chainrule"
    assert match_figure("forward_mode.pdf") == "forward_mode"
    assert match_figure("forward_mode.txt") is None
    assert match_figure("missing") is None


def test_default_output_dir_installed(monkeypatch, tmp_path, capsys):
    site = tmp_path / "venv" / "lib" / "site-packages" / "matcalc_diagrams"
    monkeypatch.setattr(_common, "PACKAGE_DIR", str(site))
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)

    assert main(["--figure", "sparse_matrix"]) == 0
    expected = work / "assets" / "img" / "2025-04-28-sparse-autodiff"
    assert os.listdir(expected) == ["sparse_matrix.svg"]
    assert not (tmp_path / "venv" / "lib" / "assets").exists()
    assert os.path.join("assets", "img") in capsys.readouterr().out


def test_default_output_dir_checkout(monkeypatch, tmp_path):
    checkout = tmp_path / "blog"
    monkeypatch.setattr(
        _common, "PACKAGE_DIR", str(checkout / "scripts" / "matcalc_diagrams")
    )
    monkeypatch.chdir(tmp_path)
    assert _common.repo_root() == str(checkout)
    assert _common.default_output_dir() == os.path.join(
        str(checkout), "assets", "img", "2025-04-28-sparse-autodiff"
    )
