"""Profile completion workflow (application layer)."""

from dataclasses import dataclass
from typing import Any, Literal, Optional, Tuple

from use_cases.profile_gate import ProfileCompletionGate
from use_cases.session_models import Session

ProfileFlowStatus = Literal["COMPLETED", "REJECTED"]

REQUIRED_FIELDS = ("display_name", "phone", "city")


@dataclass(frozen=True)
class ProfileForm:
    display_name: str
    phone: str
    city: str

    def cleaned(self) -> "ProfileForm":
        return ProfileForm(
            display_name=self.display_name.strip(),
            phone=self.phone.strip(),
            city=self.city.strip(),
        )

    def missing_fields(self) -> Tuple[str, ...]:
        return tuple(name for name in REQUIRED_FIELDS if not getattr(self, name).strip())


@dataclass(frozen=True)
class ProfileFlowResult:
    status: ProfileFlowStatus
    reason: str
    missing: Tuple[str, ...] = ()
    session: Optional[Session] = None


def submit_profile(
    session: Session,
    form: ProfileForm,
    profiles: Any,
    gate: ProfileCompletionGate,
) -> ProfileFlowResult:
    """Save the profile, then emit the one-time completion event."""
    if session.state == "complete":
        return ProfileFlowResult(status="COMPLETED", reason="already_complete", session=session)
    if session.state != "incomplete_profile":
        return ProfileFlowResult(status="REJECTED", reason="not_authenticated")

    missing = form.missing_fields()
    if missing:
        return ProfileFlowResult(status="REJECTED", reason="missing_fields", missing=missing)

    cleaned = form.cleaned()
    if not profiles.save_profile(session.user_id, cleaned.display_name, cleaned.phone, cleaned.city):
        return ProfileFlowResult(status="REJECTED", reason="save_failed")

    outcome = gate.complete(session.user_id)
    if outcome.session.state != "complete" or outcome.session.user_id != session.user_id:
        # Signed out or switched accounts while the form was open
        return ProfileFlowResult(status="REJECTED", reason="session_changed", session=outcome.session)
    return ProfileFlowResult(status="COMPLETED", reason="completed", session=outcome.session)
