"""Test module to run the demo entry points

The tests are run using pytest.
"""

import main_app
from qspline import cu2qu


def test_cu2qu_main(capsys):
    """Test function for the cu2qu demo"""
    cu2qu.main()
    output = capsys.readouterr().out
    assert "tolerance=1.0: [(50.0, 50.0), (125.0, 125.0), (200.0, 50.0)]" in output


def test_main_app(tmp_path):
    """Test function for main_app"""
    filename = tmp_path / "main_app.svg"
    main_app.main(str(filename))
    assert filename.exists()
    assert 'inkscape:label="debug"' in filename.read_text(encoding="utf-8")
