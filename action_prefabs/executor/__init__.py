"""Authority gate deciding where action requests are executed.

Main Components:
    - AuthorityGate: Routes requests to local execution or the authority
    - Principal / Role: The caller and its permission level
    - GateDecision: Outcome of the routing decision
"""

from action_prefabs.executor.authority import (
    RECEIVER_NAME,
    AuthorityGate,
    GateDecision,
    Principal,
    Role,
    policy_admits,
)

__all__ = [
    "AuthorityGate",
    "GateDecision",
    "Principal",
    "Role",
    "RECEIVER_NAME",
    "policy_admits",
]
