import io

import pytest
from PIL import Image

from geospread import cli
from geospread.io import group_inputs, resolve_input_paths


def write_csv(path, n):
    lines = ["id,lat,lng,timestamp,name,color"]
    for i in range(n):
        offset = 0.0 if i < n // 2 else 0.01
        lines.append(f"{i},{37.5 + offset},{127.0 + offset},2024-05-01T{9 + i // 60:02d}:{i % 60:02d}:00Z,p{i},blue")
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def write_png(path):
    buffer = io.BytesIO()
    Image.new("RGB", (4, 4), "white").save(buffer, format="PNG")
    path.write_bytes(buffer.getvalue())
    return path


def test_cli_builds_map_with_prediction(tmp_path, capsys):
    points = write_csv(tmp_path / "points.csv", 30)
    output = tmp_path / "map.html"

    cli.main([str(points), "--predict", "--date", "2024-05-01", "--colors", "blue", "-o", str(output)])

    out = capsys.readouterr().out
    assert "Imported 30 marker(s) from points.csv." in out
    assert "Displayed markers: 30" in out
    assert "Centroid moved" in out
    assert output.exists()
    assert "Centroid shift prediction" in output.read_text(encoding="utf-8")


def test_cli_reports_skipped_prediction_and_photos_without_gps(tmp_path, capsys):
    points = write_csv(tmp_path / "points.csv", 5)
    photo = write_png(tmp_path / "blank.png")
    output = tmp_path / "map.html"

    cli.main([str(photo), str(points), "--predict", "-o", str(output)])

    out = capsys.readouterr().out
    assert "Imported 0 of 1 photo(s)." in out
    assert "blank.png has no GPS data" in out
    assert "Prediction skipped: needs at least 30 displayed markers (have 5)." in out
    assert output.exists()


def test_cli_min_for_predict_override(tmp_path, capsys):
    points = write_csv(tmp_path / "points.csv", 4)
    cli.main([str(points), "--predict", "--min-for-predict", "4", "-o", str(tmp_path / "map.html")])
    assert "Centroid moved" in capsys.readouterr().out


def test_cli_rejects_invalid_settings(tmp_path):
    points = write_csv(tmp_path / "points.csv", 4)
    with pytest.raises(SystemExit):
        cli.main([str(points), "--min-for-predict", "1", "-o", str(tmp_path / "map.html")])


def test_cli_requires_existing_inputs(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(tmp_path / "missing.csv")])
    assert "Input file not found" in str(excinfo.value)


def test_cli_fails_when_nothing_imports(tmp_path):
    photo = write_png(tmp_path / "blank.png")
    with pytest.raises(SystemExit) as excinfo:
        cli.main([str(photo), "-o", str(tmp_path / "map.html")])
    assert "No markers" in str(excinfo.value)


def test_group_inputs_keeps_order(tmp_path):
    paths = [tmp_path / "a.jpg", tmp_path / "b.jpg", tmp_path / "c.csv", tmp_path / "d.JPG"]
    groups = group_inputs(paths)
    assert [(kind, [p.name for p in group]) for kind, group in groups] == [
        ("photos", ["a.jpg", "b.jpg"]),
        ("table", ["c.csv"]),
        ("photos", ["d.JPG"]),
    ]


def test_resolve_input_paths_rejects_directories(tmp_path):
    with pytest.raises(SystemExit):
        resolve_input_paths([tmp_path])
