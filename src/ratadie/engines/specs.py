from __future__ import annotations

from typing import Dict

from ..core.types import (
    COMPUTATIONAL_EPOCH, INT16, INT32, INT64, UINT16, UINT32, UNIX_EPOCH,
    AlgorithmId, AlgorithmSpec, Date, IntType,
)


def _gregorian(name: str, year_type: IntType, rata_die_type: IntType, epoch: Date, **meta) -> AlgorithmSpec:
    return AlgorithmSpec(
        kind="gregorian",
        id=AlgorithmId("eaf", name, "1"),
        year_type=year_type,
        rata_die_type=rata_die_type,
        epoch=epoch,
        meta=meta,
    )


# ============================================================
# THE CONVERSION CORE
# ============================================================

# 16-bit years and 32-bit signed day counts, as in std::chrono::year / days.
GREGORIAN = _gregorian("gregorian", INT16, INT32, UNIX_EPOCH, note="default configuration")

# Same widths, other epochs: each one moves the internal shift constants.
EPOCH_VARIANTS: Dict[str, AlgorithmSpec] = {
    f"gregorian-16@{e}": _gregorian(f"gregorian-16@{e}", INT16, INT32, e)
    for e in (
        COMPUTATIONAL_EPOCH,
        Date(0, 1, 1),
        Date(-1, 1, 1),
        Date(-400, 1, 1),
        Date(-1970, 1, 1),
        Date(-32768, 1, 1),
    )
}

UGREGORIAN_16 = _gregorian("ugregorian-16", UINT16, UINT32, COMPUTATIONAL_EPOCH)
UGREGORIAN_32 = _gregorian("ugregorian-32", UINT32, UINT32, COMPUTATIONAL_EPOCH)

# 32-bit years: to_date runs out of internal days before the year type runs out.
GREGORIAN_32 = _gregorian("gregorian-32", INT32, INT32, UNIX_EPOCH)
GREGORIAN_32_1912 = _gregorian("gregorian-32@1912-06-23", INT32, INT32, Date(1912, 6, 23))
GREGORIAN_32_M1912 = _gregorian("gregorian-32@-1912-06-23", INT32, INT32, Date(-1912, 6, 23))

GREGORIAN_64 = _gregorian("gregorian-64", INT64, INT64, UNIX_EPOCH)


# ============================================================
# REFERENCE ALGORITHMS
# ============================================================

BAUM = AlgorithmSpec(
    kind="baum",
    id=AlgorithmId("reference", "baum", "2017"),
    year_type=INT16,
    rata_die_type=INT32,
    meta={"source": "P. Baum, Date Algorithms, sections 5.1 and 6.2.1/3"},
)

GLIBC = AlgorithmSpec(
    kind="glibc",
    id=AlgorithmId("reference", "glibc", "2.31"),
    year_type=INT16,
    rata_die_type=INT32,
    meta={"source": "glibc time/mktime.c and time/offtime.c"},
)


# ============================================================
# REGISTRY
# ============================================================

ALL_SPECS: Dict[str, AlgorithmSpec] = {
    "gregorian": GREGORIAN,
    **EPOCH_VARIANTS,
    "ugregorian-16": UGREGORIAN_16,
    "ugregorian-32": UGREGORIAN_32,
    "gregorian-32": GREGORIAN_32,
    "gregorian-32@1912-06-23": GREGORIAN_32_1912,
    "gregorian-32@-1912-06-23": GREGORIAN_32_M1912,
    "gregorian-64": GREGORIAN_64,
    "baum": BAUM,
    "glibc": GLIBC,
}
