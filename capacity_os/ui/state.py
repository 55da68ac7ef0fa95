"""
Session state management for Streamlit app.

Assumptions live in session state and are handed to the model as an
explicit FirmAssumptions value.
"""
import streamlit as st
from typing import Any, Dict, List

from capacity_os.config import DEFAULT_ASSUMPTIONS
from capacity_os.data.roles import Bucket, Division, DIVISION_BUCKETS
from capacity_os.metrics.utilisation import BucketAssumptions
from capacity_os.modeling.capacity_model import FirmAssumptions


# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULTS = {
    "division": Division.PLANNING.value,
    "view_bucket": "all",
    "active_clients": DEFAULT_ASSUMPTIONS["active_clients"],
    "monthly_growth_pct": DEFAULT_ASSUMPTIONS["monthly_growth_pct"],
}

for _bucket in Bucket:
    DEFAULTS[f"{_bucket.value}_headcount"] = DEFAULT_ASSUMPTIONS["headcount"][_bucket.value]
    DEFAULTS[f"{_bucket.value}_capacity"] = DEFAULT_ASSUMPTIONS["capacity_per_head"]
    DEFAULTS[f"{_bucket.value}_hours_per_client"] = DEFAULT_ASSUMPTIONS["hours_per_client"][_bucket.value]
    DEFAULTS[f"{_bucket.value}_target"] = DEFAULT_ASSUMPTIONS["target_utilisation_pct"]

for _division in Division:
    DEFAULTS[f"{_division.value}_avg_fee"] = DEFAULT_ASSUMPTIONS["avg_client_fee"][_division.value]
    DEFAULTS[f"{_division.value}_fee_is_annual"] = DEFAULT_ASSUMPTIONS["fee_is_annual"][_division.value]


# =============================================================================
# STATE HELPERS
# =============================================================================

def init_state():
    """Initialize all session state keys with defaults."""
    for key, default in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default


def get_state(key: str) -> Any:
    """Get state value with default fallback."""
    init_state()
    return st.session_state.get(key, DEFAULTS.get(key))


def set_state(key: str, value: Any):
    """Set state value."""
    st.session_state[key] = value


def reset_state():
    """Reset all assumptions to defaults."""
    for key, default in DEFAULTS.items():
        st.session_state[key] = default


def get_division() -> Division:
    return Division(get_state("division"))


def state_to_assumptions(state: Dict[str, Any]) -> FirmAssumptions:
    """Snapshot a state mapping into immutable model assumptions."""
    division = Division(state.get("division", DEFAULTS["division"]))

    def value(key: str) -> Any:
        return state.get(key, DEFAULTS[key])

    buckets = {
        b: BucketAssumptions(
            headcount=value(f"{b.value}_headcount"),
            capacity_per_head=value(f"{b.value}_capacity"),
            hours_per_client=value(f"{b.value}_hours_per_client"),
            target_utilisation_pct=value(f"{b.value}_target"),
        )
        for b in DIVISION_BUCKETS[division]
    }
    return FirmAssumptions(
        division=division,
        buckets=buckets,
        active_clients=value("active_clients"),
        monthly_growth_pct=value("monthly_growth_pct"),
        avg_client_fee=value(f"{division.value}_avg_fee"),
        fee_is_annual=value(f"{division.value}_fee_is_annual"),
    )


def get_assumptions() -> FirmAssumptions:
    init_state()
    return state_to_assumptions(dict(st.session_state))


def view_options(division: Division) -> List[str]:
    """Analytics view choices: every role, then each bucket of the division."""
    return ["all"] + [b.value for b in DIVISION_BUCKETS[division]]


def resolve_view_bucket(value: Any, division: Division) -> str:
    """Stored view choice, or "all" when it is not a choice for this division."""
    return value if value in view_options(division) else "all"
