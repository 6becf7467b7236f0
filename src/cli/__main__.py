# src/cli/__main__.py
import sys, json
from pathlib import Path

from src.core.errors import AmountOutOfRange
from src.core.money import round_money
from src.core.quote_calc import calc_totals, clamp_discount, describe_lines, line_amounts
from src.services.whatsapp import format_quote_message

USAGE = """Usage:
  python -m src.cli totals <quote.json>
  python -m src.cli whatsapp <quote.json> [--lang=sv]

quote.json:
  {"quote_number": "Q-00001", "items": [
     {"product_name": "Skruv", "quantity": 3, "unit_price": 10.0,
      "discount": 10, "tax_percentage": 5}
  ]}

Examples:
  python -m src.cli totals examples/quote.json
  python -m src.cli whatsapp examples/quote.json --lang=pt-BR
"""

def _load_json(p: str):
    try:
        return json.loads(Path(p).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        print(f"Error reading JSON '{p}': {e}", file=sys.stderr)
        sys.exit(2)

def _normalize_items(quote: dict) -> list:
    items = []
    for raw in quote.get("items") or []:
        item = dict(raw)
        try:
            item["discount"] = clamp_discount(item.get("discount"))
        except ValueError as e:
            print(f"Error in quote items: {e}", file=sys.stderr)
            sys.exit(2)
        items.append(item)
    return items

def _run(cmd: str, quote: dict, items: list, lang: str):
    if cmd == "totals":
        out = {"lines": describe_lines(items)}
        out.update(calc_totals(items).rounded())
        sys.stdout.write(json.dumps(out, ensure_ascii=False, indent=2) + "\n")
        return

    if cmd == "whatsapp":
        # Beräknade belopp fylls i där filen saknar dem
        for item in items:
            if item.get("total_price") is None:
                item["total_price"] = round_money(line_amounts(item).total)
        quote["items"] = items
        if quote.get("total_amount") is None:
            quote["total_amount"] = round_money(calc_totals(items).grand_total)
        sys.stdout.write(format_quote_message(quote, lang) + "\n")
        return

    print(USAGE, file=sys.stderr); sys.exit(1)

def main(argv=None):
    argv = list(sys.argv if argv is None else argv)
    if len(argv) < 3:
        print(USAGE, file=sys.stderr); sys.exit(1)

    cmd = argv[1].lower()
    quote_path = argv[2]

    lang = "en"
    for arg in argv[3:]:
        if arg.startswith("--lang="):
            lang = arg.split("=", 1)[1] or "en"

    quote = _load_json(quote_path)
    items = _normalize_items(quote)

    try:
        _run(cmd, quote, items, lang)
    except AmountOutOfRange as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

if __name__ == "__main__":
    main()
