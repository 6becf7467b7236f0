import json

import pytest

from src.cli.__main__ import main


def _write(tmp_path, data):
    p = tmp_path / "quote.json"
    p.write_text(json.dumps(data), encoding="utf-8")
    return str(p)


def test_totals_command(tmp_path, capsys):
    path = _write(tmp_path, {"items": [
        {"quantity": 1, "unit_price": 100.0},
        {"quantity": 1, "unit_price": 50.0, "discount": 20, "tax_percentage": 10},
    ]})
    main(["cli", "totals", path])
    out = json.loads(capsys.readouterr().out)
    assert out["grand_total"] == 144.0
    assert out["total_discount"] == 10.0
    assert [l["line_total"] for l in out["lines"]] == [100.0, 44.0]


def test_whatsapp_command_fills_in_totals(tmp_path, capsys):
    path = _write(tmp_path, {
        "quote_number": "Q-00003",
        "created_at": "2026-03-05",
        "validity_date": "2026-04-05",
        "items": [{"product_name": "Skruv", "quantity": 3, "unit_price": 10, "discount": 10, "tax_percentage": 5}],
    })
    main(["cli", "whatsapp", path, "--lang=sv"])
    out = capsys.readouterr().out
    assert "1. Skruv - Antal: 3 - 28,35 kr" in out
    assert "💰 *Totalt: 28,35 kr*" in out


def test_usage_on_missing_args(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["cli"])
    assert exc.value.code == 1
    assert "Usage" in capsys.readouterr().err


def test_non_numeric_discount_is_an_error(tmp_path, capsys):
    path = _write(tmp_path, {"items": [{"quantity": 1, "unit_price": 10, "discount": "abc"}]})
    with pytest.raises(SystemExit) as exc:
        main(["cli", "totals", path])
    assert exc.value.code == 2
    assert "abc" in capsys.readouterr().err
