#!/usr/bin/env python
"""
Validate the time-entry export against schema requirements.

Usage:
    python scripts/validate_inputs.py
    python scripts/validate_inputs.py --data-dir /path/to/data
"""
import argparse
import sys
from pathlib import Path

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import pandas as pd
from capacity_os.config import config, TABLE_FILES
from capacity_os.data.schema import normalise_columns, validate_schema, ensure_column_types
from capacity_os.metrics.aggregation import map_buckets


def validate_file(filepath: Path, table_name: str) -> dict:
    """Validate a single file."""
    result = {
        "exists": False,
        "format": None,
        "rows": 0,
        "columns": 0,
        "valid": False,
        "missing_required": [],
        "missing_optional": [],
        "unmapped_categories": [],
        "negative_durations": 0,
        "bad_timestamps": 0,
        "errors": []
    }

    parquet_path = filepath.with_suffix(".parquet")
    csv_path = filepath.with_suffix(".csv")

    if parquet_path.exists():
        result["exists"] = True
        result["format"] = "parquet"
        load_path = parquet_path
    elif csv_path.exists():
        result["exists"] = True
        result["format"] = "csv"
        load_path = csv_path
    else:
        result["errors"].append(f"File not found: {filepath}.(parquet|csv)")
        return result

    try:
        if result["format"] == "parquet":
            df = pd.read_parquet(load_path)
        else:
            df = pd.read_csv(load_path)

        result["rows"] = len(df)
        result["columns"] = len(df.columns)
    except (OSError, ValueError) as e:
        result["errors"].append(f"Failed to load: {e}")
        return result

    df = normalise_columns(df)
    schema_result = validate_schema(df, table_name, strict=False)
    result["valid"] = schema_result["is_valid"]
    result["missing_required"] = schema_result["missing_required"]
    result["missing_optional"] = schema_result["missing_optional"]

    if not result["valid"]:
        return result

    raw_timestamps = df["timestamp"]
    df = ensure_column_types(df)

    unmapped = map_buckets(df).isna()
    result["unmapped_categories"] = sorted(df.loc[unmapped, "category"].astype(str).unique().tolist())
    result["negative_durations"] = int((df["duration_minutes"] < 0).sum())
    result["bad_timestamps"] = int((df["timestamp"].isna() & raw_timestamps.notna()).sum())

    return result


def main():
    parser = argparse.ArgumentParser(description="Validate the time-entry export")
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Override data directory"
    )

    args = parser.parse_args()

    if args.data_dir:
        data_dir = Path(args.data_dir)
    else:
        data_dir = config.data_dir

    processed_dir = data_dir / "processed"

    print("=" * 60)
    print("Time Entry Export Validation")
    print("=" * 60)
    print(f"Source directory: {processed_dir}")
    print()

    all_valid = True

    for table_key, filename in TABLE_FILES.items():
        filepath = processed_dir / filename

        print(f"Validating: {table_key}")
        print("-" * 40)

        result = validate_file(filepath, table_key)

        if result["exists"]:
            print(f"  ✓ Found: {filename}.{result['format']}")
            print(f"    Rows: {result['rows']:,}")
            print(f"    Columns: {result['columns']}")

            if result["valid"]:
                print(f"  ✓ Schema valid")
            else:
                print(f"  ✗ Schema invalid")
                print(f"    Missing required: {result['missing_required']}")
                all_valid = False

            if result["missing_optional"]:
                print(f"  ⚠ Missing optional: {result['missing_optional']}")

            if result["unmapped_categories"]:
                print(f"  ⚠ Categories outside every bucket (ignored): {result['unmapped_categories']}")

            if result["negative_durations"]:
                print(f"  ✗ Negative durations: {result['negative_durations']}")
                all_valid = False

            if result["bad_timestamps"]:
                print(f"  ⚠ Unparseable timestamps (ignored): {result['bad_timestamps']}")
        else:
            print(f"  ✗ Not found: {filename}")
            print(f"    (REQUIRED)")
            all_valid = False

        if result["errors"]:
            for err in result["errors"]:
                print(f"  ✗ Error: {err}")
            all_valid = False

        print()

    print("=" * 60)
    if all_valid:
        print("✓ All validations passed")
        sys.exit(0)
    else:
        print("✗ Validation failed - see errors above")
        sys.exit(1)


if __name__ == "__main__":
    main()
