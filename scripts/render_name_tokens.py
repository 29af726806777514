"""
Print the name/age template tokens for every record in a JSON export.

Accepts either a list of CMS posts ({"acf": {...}, "title": {"rendered": ...}})
or a list of flat field mappings. A single object is treated as a one-record list.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from kana_names.records import KanaNamesConfig, build_name_tokens
from kana_names.romanizer import LongVowelPreferences


def load_records(path: Path) -> list:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise SystemExit(f"Cannot read records from {path}: {e}")

    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise SystemExit(f"Expected a JSON list or object in {path}, got {type(data).__name__}")
    return data


def split_post(item: dict) -> tuple:
    """Return (custom fields, post title) for a post or a flat record."""
    if isinstance(item.get("acf"), dict):
        title = item.get("title")
        rendered = title.get("rendered") if isinstance(title, dict) else title
        return item["acf"], rendered
    return item, None


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Render name display tokens for exported records.")
    parser.add_argument("records_path", type=Path, help="Path to the JSON export of records.")
    parser.add_argument("--long_o", type=str, default=None, help="Process-level long-o strategy (omit/oh/macron/ou).")
    parser.add_argument("--long_u", type=str, default=None, help="Process-level long-u strategy (omit/oh/macron/ou).")
    parser.add_argument("--verbose", action="store_true", help="Log ignored values at DEBUG level.")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )

    config = KanaNamesConfig.from_env()
    if args.long_o or args.long_u:
        config = config.with_long_vowel(
            LongVowelPreferences(o=args.long_o or config.long_vowel.o, u=args.long_u or config.long_vowel.u)
        )

    records = load_records(args.records_path)
    logging.info(f"Rendering name tokens for {len(records)} records")
    for item in records:
        if not isinstance(item, dict):
            logging.warning(f"Skipping non-object record: {item!r}")
            continue
        fields, title = split_post(item)
        tokens = build_name_tokens(fields, config, title=title)
        tokens["id_code"] = str(fields.get("id_code") or "")
        json.dump(tokens, sys.stdout, ensure_ascii=False)
        sys.stdout.write("\n")
