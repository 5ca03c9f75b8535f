"""Name/ID pairing for the message ID overview."""

from msgidrec.pairing.pairer import (
    collapse_default_submessages,
    pair_names_and_ids,
    pair_positionally,
    sort_records,
    telemetry_name_records,
)

__all__ = [
    "collapse_default_submessages",
    "pair_names_and_ids",
    "pair_positionally",
    "sort_records",
    "telemetry_name_records",
]
