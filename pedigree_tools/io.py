"""Reading pedigree tables from CSV files or DataFrames."""
import logging
from typing import Sequence, Union

import pandas as pd

from .definitions import DAM_COL, LABEL_COL, MISSING_STRINGS, SIRE_COL
from .editing import complete_pedigree
from .exceptions import ValidationError
from .pedigree import normalize_value

logger = logging.getLogger(__name__)


def read_pedigree(source: Union[str, pd.DataFrame],
                  header: bool = False,
                  separator: str = ",",
                  missing_strings: Sequence[str] = MISSING_STRINGS,
                  complete: bool = False) -> pd.DataFrame:
    """
    Reads a three-column pedigree (individual, sire, dam).

    Values are read as strings and stripped; any of ``missing_strings`` (and
    empty cells) become an unknown parent (None). Only the first three
    columns are used.

    Args:
        source: Path to a delimited file, or a DataFrame.
        header (bool): Whether the file has a header line.
        separator (str): Field delimiter.
        missing_strings: Strings meaning "unknown parent".
        complete (bool): Add missing parents and order by generation with
            :func:`complete_pedigree`.

    Returns:
        pd.DataFrame: Columns label, sire, dam (plus generation when
        ``complete`` is set).

    Raises:
        TypeError: If ``source`` is neither a path nor a DataFrame.
        ValidationError: If fewer than three columns are present or the file
            cannot be parsed.
    """
    if isinstance(source, str):
        logger.debug("Reading pedigree from %s with delimiter %r.", source, separator)
        try:
            df = pd.read_csv(source, header=0 if header else None, sep=separator,
                             dtype=str, keep_default_na=False)
        except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise ValidationError(f"Error reading pedigree file {source}: {e}") from e
    elif isinstance(source, pd.DataFrame):
        df = source.copy()
    else:
        raise TypeError("Input must be a file path (str) or a pandas DataFrame.")

    if len(df.columns) < 3:
        raise ValidationError("Pedigree must have at least 3 columns: individual, sire, dam.")
    df = df.iloc[:, :3].copy()
    df.columns = [LABEL_COL, SIRE_COL, DAM_COL]

    missing = set(missing_strings)

    def clean(value):
        value = normalize_value(value)
        if value is None:
            return None
        value = str(value).strip()
        return None if value in missing else value

    for col in (LABEL_COL, SIRE_COL, DAM_COL):
        df[col] = pd.Series([clean(v) for v in df[col]], index=df.index, dtype=object)

    if df[LABEL_COL].isna().any():
        raise ValidationError("Individual column contains missing values.")
    logger.debug("Read %d pedigree rows.", len(df))

    if complete:
        return complete_pedigree(df[SIRE_COL].tolist(), df[DAM_COL].tolist(),
                                 df[LABEL_COL].tolist())
    return df.reset_index(drop=True)
