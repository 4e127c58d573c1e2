from typing import Optional, Tuple
import logging
import io
import difflib
import pandas as pd
from palindrome_tip.core import DEFAULT_TIP_PERCENT
from palindrome_tip.formatting import calculate_inputs, fmt_money

logger = logging.getLogger(__name__)

SHEET_NAME = "Palindrome Tips"

RESULT_COLUMNS = [
    "Simplified Subtotal",
    "Base Tip",
    "Tentative Total",
    "Palindrome Total",
    "Palindrome Tip",
    "Palindrome Tip %",
    "Error",
]

SUBTOTAL_KW = ["subtotal", "sub total", "sub-total", "amount"]
TOTAL_KW = ["total", "grand total", "with tax", "bill", "owed"]
TIP_KW = ["tip %", "tip percent", "tip", "percent", "gratuity"]


def read_file_to_df(file_bytes: bytes, filename: str) -> pd.DataFrame:
    """Read Excel or CSV file from bytes and return DataFrame.

    Report title rows above the real header are skipped: the first row that
    is mostly filled in is taken as the header.

    Raises:
        ValueError: If file format is not supported
    """
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""

    if ext in ("xlsx", "xls"):
        df = pd.read_excel(io.BytesIO(file_bytes), header=None, dtype=str)
    elif ext == "csv":
        df = pd.read_csv(io.BytesIO(file_bytes), header=None, dtype=str)
    else:
        raise ValueError(f"Unsupported file format: {ext}. Supported: xlsx, xls, csv")

    header_idx = 0
    if len(df) > 1:
        for idx in range(min(15, len(df))):
            row = df.iloc[idx]
            non_empty = sum(1 for v in row if not pd.isna(v) and str(v).strip() != "")
            if non_empty < len(df.columns) * 0.5:
                continue
            header_idx = idx
            break

    header_row = [str(x).strip() for x in df.iloc[header_idx]]
    df = df.iloc[header_idx + 1:].reset_index(drop=True)
    df.columns = header_row

    logger.info(f"Applied header from row {header_idx}. Columns: {list(df.columns)}")
    return df


def detect_columns(
    df: pd.DataFrame,
    subtotal_col: Optional[str] = None,
    total_col: Optional[str] = None,
    tip_col: Optional[str] = None,
) -> Tuple[str, str, Optional[str]]:
    """Heuristically find the subtotal, total and tip-percent columns.

    Columns passed in are kept as given and never picked for another role;
    only the missing ones are detected.

    Returns (subtotal_col, total_col, tip_col); tip_col may be None.
    Raises KeyError if subtotal or total cannot be found.
    """
    cols = [c for c in df.columns]
    lowered = {c: str(c).lower().strip() for c in cols}
    taken = {c for c in (subtotal_col, total_col, tip_col) if c}

    def find_by_keywords(keywords, exclude=()):
        # exact names first, then substrings
        for kw in keywords:
            for orig, low in lowered.items():
                if orig not in taken and low == kw:
                    return orig
        for kw in keywords:
            for orig, low in lowered.items():
                if orig in taken or any(x in low for x in exclude):
                    continue
                if kw in low:
                    return orig
        return None

    def find_fuzzy(keywords):
        candidates = [low for orig, low in lowered.items() if orig not in taken]
        for kw in keywords:
            matches = difflib.get_close_matches(kw, candidates, n=1, cutoff=0.6)
            if matches:
                return next(orig for orig, low in lowered.items() if low == matches[0] and orig not in taken)
        return None

    def claim(col):
        if col is not None:
            taken.add(col)
        return col

    if subtotal_col is None:
        subtotal_col = claim(find_by_keywords(SUBTOTAL_KW) or find_fuzzy(SUBTOTAL_KW))
    if tip_col is None:
        tip_col = claim(find_by_keywords(TIP_KW, exclude=("total",)) or find_fuzzy(TIP_KW))
    if total_col is None:
        total_col = claim(find_by_keywords(TOTAL_KW) or find_fuzzy(TOTAL_KW))

    missing = [n for n, v in (("subtotal_col", subtotal_col), ("total_col", total_col)) if v is None]
    if missing:
        raise KeyError(f"Could not auto-detect required columns, missing: {missing}. Columns found: {cols}")

    logger.info(
        f"Auto-detected columns: subtotal_col={subtotal_col}, total_col={total_col}, "
        f"tip_col={tip_col} from columns: {cols}"
    )
    return subtotal_col, total_col, tip_col


def _raw(value) -> Optional[str]:
    if value is None or pd.isna(value):
        return None
    return str(value)


def calculate_batch_df(
    df: pd.DataFrame,
    subtotal_col: Optional[str] = None,
    total_col: Optional[str] = None,
    tip_col: Optional[str] = None,
    default_tip_percent=DEFAULT_TIP_PERCENT,
) -> pd.DataFrame:
    """Calculate a palindrome tip for every bill in `df`.

    Rows that fail validation are kept with the validation message in the
    "Error" column and blank results. When no tip column is given or found,
    `default_tip_percent` is used for every row.

    Returns a new DataFrame: the input columns followed by RESULT_COLUMNS.
    """
    if not (subtotal_col and total_col and tip_col):
        subtotal_col, total_col, tip_col = detect_columns(df, subtotal_col, total_col, tip_col)

    required_cols = [c for c in (subtotal_col, total_col, tip_col) if c]
    if not all(col in df.columns for col in required_cols):
        missing = [col for col in required_cols if col not in df.columns]
        raise KeyError(f"Missing required columns: {missing}")

    records = []
    for _, row in df.iterrows():
        subtotal_raw = _raw(row[subtotal_col])
        total_raw = _raw(row[total_col])
        tip_raw = _raw(row[tip_col]) if tip_col else str(default_tip_percent)

        validation, result = calculate_inputs(subtotal_raw, total_raw, tip_raw)
        if result is None:
            records.append({c: None for c in RESULT_COLUMNS[:-1]} | {"Error": validation.message})
            continue

        records.append({
            "Simplified Subtotal": float(result.simplified_subtotal),
            "Base Tip": float(fmt_money(result.base_tip)),
            "Tentative Total": float(fmt_money(result.tentative_total)),
            "Palindrome Total": float(result.palindrome_total),
            "Palindrome Tip": float(fmt_money(result.palindrome_tip)),
            "Palindrome Tip %": float(fmt_money(result.palindrome_tip / result.subtotal * 100)),
            "Error": "",
        })

    results_df = pd.DataFrame(records, columns=RESULT_COLUMNS)
    skipped = int((results_df["Error"] != "").sum())
    if skipped:
        logger.warning(f"{skipped} of {len(df)} rows failed validation")
    logger.info(f"Calculated palindrome tips for {len(df) - skipped} rows")

    # keep input columns that share a result label, under a suffixed name
    clashing = {c: f"{c} (input)" for c in df.columns if c in RESULT_COLUMNS}
    inputs_df = df.rename(columns=clashing).reset_index(drop=True)

    return pd.concat([inputs_df, results_df.reset_index(drop=True)], axis=1)


def write_results_excel(results_df: pd.DataFrame, target) -> None:
    """Write the results sheet to a path or a binary file object."""
    with pd.ExcelWriter(target, engine="openpyxl") as writer:
        results_df.to_excel(writer, index=False, sheet_name=SHEET_NAME)


def calculate_batch(
    input_file_path: str,
    output_file_path: str,
    subtotal_col: Optional[str] = None,
    total_col: Optional[str] = None,
    tip_col: Optional[str] = None,
    default_tip_percent=DEFAULT_TIP_PERCENT,
) -> pd.DataFrame:
    """Path-based wrapper: read a CSV/Excel file of bills, write an Excel workbook."""
    with open(input_file_path, "rb") as f:
        df = read_file_to_df(f.read(), input_file_path)

    results_df = calculate_batch_df(df, subtotal_col, total_col, tip_col, default_tip_percent)
    write_results_excel(results_df, output_file_path)
    return results_df
