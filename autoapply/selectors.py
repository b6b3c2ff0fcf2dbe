"""Element kinds the automation can ask the page for, and their CSS selectors."""
from __future__ import annotations

from enum import Enum


class SelectorKind(Enum):
    POSTING_CARD = "posting_card"
    CARD_TITLE_LINK = "card_title_link"
    CARD_COMPANY = "card_company"
    DETAIL_TITLE = "detail_title"
    DETAIL_COMPANY = "detail_company"
    DETAIL_LOCATION = "detail_location"
    APPLY_BUTTON = "apply_button"
    WIZARD = "wizard"
    WIZARD_DIALOG = "wizard_dialog"
    UNRESOLVED_REQUIRED_FIELD = "unresolved_required_field"
    SUBMIT_BUTTON = "submit_button"
    REVIEW_BUTTON = "review_button"
    NEXT_BUTTON = "next_button"
    DISMISS_BUTTON = "dismiss_button"
    DISCARD_CONFIRM = "discard_confirm"
    RESULTS_LIST = "results_list"
    LOGIN_FORM = "login_form"


# LinkedIn jobs search markup. Alternatives for one kind are tried together
# as a CSS selector list.
LINKEDIN_SELECTORS: dict[SelectorKind, tuple[str, ...]] = {
    SelectorKind.POSTING_CARD: (".jobs-search-results__list-item",),
    SelectorKind.CARD_TITLE_LINK: ("a.job-card-list__title", ".job-card-list__title"),
    SelectorKind.CARD_COMPANY: (".job-card-container__company-name",),
    SelectorKind.DETAIL_TITLE: (".job-details-jobs-unified-top-card__job-title",),
    SelectorKind.DETAIL_COMPANY: (".job-details-jobs-unified-top-card__company-name",),
    SelectorKind.DETAIL_LOCATION: (".job-details-jobs-unified-top-card__bullet",),
    SelectorKind.APPLY_BUTTON: (".jobs-apply-button",),
    SelectorKind.WIZARD: (".jobs-easy-apply-content",),
    SelectorKind.WIZARD_DIALOG: (".jobs-easy-apply-modal", '.artdeco-modal[role="dialog"]'),
    SelectorKind.UNRESOLVED_REQUIRED_FIELD: (
        "input[required]:not([value])",
        "textarea[required]:not([value])",
    ),
    SelectorKind.SUBMIT_BUTTON: ('button[aria-label="Submit application"]',),
    SelectorKind.REVIEW_BUTTON: ('button[aria-label="Review your application"]',),
    SelectorKind.NEXT_BUTTON: ('button[aria-label="Continue to next step"]',),
    SelectorKind.DISMISS_BUTTON: ('button[aria-label="Dismiss"]', ".artdeco-modal__dismiss"),
    SelectorKind.DISCARD_CONFIRM: ('button[data-control-name="discard_application_confirm_btn"]',),
    SelectorKind.RESULTS_LIST: (".jobs-search-results-list",),
    SelectorKind.LOGIN_FORM: ("form.login__form", "#username"),
}


def css_for(kind: SelectorKind, table: dict[SelectorKind, tuple[str, ...]] | None = None) -> str:
    """Join the alternatives registered for *kind* into one selector list."""
    table = table if table is not None else LINKEDIN_SELECTORS
    try:
        return ", ".join(table[kind])
    except KeyError:
        raise KeyError(f"no selector registered for {kind.name}") from None
