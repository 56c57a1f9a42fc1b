import xml.etree.ElementTree as ET

import pytest

from build_pie_charts import main

NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def fruit(tmp_path):
    path = tmp_path / "fruit.toml"
    path.write_text(
        '# weekly\ntitle = "Fruit"\nslices = [\n'
        '  { label = "Apples", value = 3 },\n'
        '  { label = "Pears", value = 1 },\n]\n',
        encoding="utf-8",
    )
    return path


def test_writes_svg_file(fruit, tmp_path):
    out = tmp_path / "fruit.svg"
    assert main([str(fruit), str(out)]) == 0
    root = ET.fromstring(out.read_text(encoding="utf-8"))
    assert root.tag == f"{NS}svg"


def test_stdout_when_no_output(fruit, capsys):
    assert main([str(fruit)]) == 0
    assert capsys.readouterr().out.lstrip().startswith("<svg")


def test_invalid_value_exits_non_zero_without_output(tmp_path, capsys):
    src = tmp_path / "bad.toml"
    src.write_text('slices = [{ label = "X", value = 0 }]')
    out = tmp_path / "bad.svg"
    assert main([str(src), str(out)]) == 1
    assert not out.exists()
    err = capsys.readouterr().err
    assert "error:" in err
    assert "'X'" in err


def test_empty_input_exits_non_zero(tmp_path, capsys):
    src = tmp_path / "empty.toml"
    src.write_text("slices = []")
    out = tmp_path / "empty.svg"
    assert main([str(src), str(out)]) == 1
    assert not out.exists()
    assert "no slices" in capsys.readouterr().err


def test_missing_input_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.toml")]) == 1
    assert "Unable to open file" in capsys.readouterr().err


def test_unwritable_output(fruit, tmp_path, capsys):
    out = tmp_path / "missing-dir" / "fruit.svg"
    assert main([str(fruit), str(out)]) == 1
    assert "Unable to write" in capsys.readouterr().err


def test_csv_input(tmp_path):
    src = tmp_path / "sales.csv"
    src.write_text("Region,Total\nNorth,10\nSouth,30\n")
    out = tmp_path / "sales.svg"
    rc = main([str(src), str(out), "--label-col", "Region", "--value-col", "Total",
               "--unit", "EUR", "--legend-position", "bottom", "--no-labels"])
    assert rc == 0
    root = ET.fromstring(out.read_text(encoding="utf-8"))
    legend = next(el for el in root.iter() if el.get("id") == "legend")
    assert [e.find(f"{NS}text").text for e in legend] == ["North: 10 EUR", "South: 30 EUR"]
    assert not [el for el in root.iter() if el.get("id") == "labels"]


def test_csv_without_columns_is_an_error(tmp_path, capsys):
    src = tmp_path / "sales.csv"
    src.write_text("Region,Total\nNorth,10\n")
    assert main([str(src)]) == 1
    assert "--label-col" in capsys.readouterr().err


def test_non_utf8_toml_is_an_error(tmp_path, capsys):
    src = tmp_path / "cafe.toml"
    src.write_bytes('title = "Café"\nslices = [{ label = "A", value = 1 }]'.encode("latin-1"))
    out = tmp_path / "cafe.svg"
    assert main([str(src), str(out)]) == 1
    assert not out.exists()
    err = capsys.readouterr().err
    assert "error:" in err
    assert "UTF-8" in err


def test_bad_excel_is_an_error(tmp_path, capsys):
    src = tmp_path / "sales.xlsx"
    src.write_text("Region,Total\nNorth,10\n")
    out = tmp_path / "sales.svg"
    assert main([str(src), str(out), "--label-col", "Region", "--value-col", "Total"]) == 1
    assert not out.exists()
    assert "unreadable table" in capsys.readouterr().err


def test_xls_is_not_read_as_a_table(tmp_path, capsys):
    src = tmp_path / "sales.xls"
    src.write_text('slices = [{ label = "A", value = 1 }]')
    assert main([str(src)]) == 0
    assert capsys.readouterr().out.lstrip().startswith("<svg")


def test_command_line_settings_override_toml(fruit, tmp_path):
    out = tmp_path / "fruit.svg"
    rc = main([str(fruit), str(out), "--title", "Veg", "--unit", "kg",
               "--legend-position", "bottom", "--radius", "60"])
    assert rc == 0
    root = ET.fromstring(out.read_text(encoding="utf-8"))
    title = next(el for el in root.iter(f"{NS}text") if el.get("class") == "title")
    assert title.text == "Veg"
    legend = next(el for el in root.iter() if el.get("id") == "legend")
    assert [e.find(f"{NS}text").text for e in legend] == ["Apples: 3 kg", "Pears: 1 kg"]
    swatch = legend[0].find(f"{NS}rect")
    wedge = next(el for el in root.iter(f"{NS}path") if "wedge-0" in el.get("class", ""))
    assert "A 60.000,60.000" in wedge.get("d")
    # bottom legend sits under the pie
    assert float(swatch.get("y")) > 60 * 2


def test_bad_radius_override_is_an_error(fruit, capsys):
    assert main([str(fruit), "--radius", "-3"]) == 1
    assert "radius" in capsys.readouterr().err
