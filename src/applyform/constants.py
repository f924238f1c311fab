"""Form engine constants shared across the SDK.

These values are referenced by the segment builder, validator, view model,
and flow controller.  A few can be overridden via environment variables so
that deployments can adjust contact details without code changes.
"""

import os

# Ids of the synthetic first/last steps that bracket every form.
WELCOME_ID = "__welcome__"
SUCCESS_ID = "__success__"

# Page questions without a page_group share this anonymous group.
DEFAULT_PAGE_GROUP = "default"

# Question types whose answers are trimmed before validation, choices included.
TEXT_LIKE_TYPES: set[str] = {"text", "email", "tel", "number", "month", "select", "options"}

# Minimum digits a phone number must contain once formatting is stripped.
# Overridable via TEL_MIN_DIGITS env var.
TEL_MIN_DIGITS = int(os.getenv("TEL_MIN_DIGITS", "10"))

# Address shown to applicants when submission fails.
# Overridable via CONTACT_EMAIL env var.
CONTACT_EMAIL = os.getenv("CONTACT_EMAIL", "nzlogisticsllc@gmail.com")

# --- Inline validation messages ---
DEFAULT_REQUIRED_MESSAGE = "This field is required."
DEFAULT_INVALID_MESSAGE = "Please enter a valid value."

# --- Success-screen messages, keyed by submission outcome ---
SUBMIT_PENDING_MESSAGE = "Submitting your application..."
SUBMIT_OK_MESSAGE = "Our team will contact you within 3–5 business days."
SUBMIT_REJECTED_MESSAGE = (
    "There was an issue saving your application. Please email us directly."
)
SUBMIT_NETWORK_MESSAGE = (
    f"Network error: please email us directly at {CONTACT_EMAIL}"
)

# --- Button labels used by the view model ---
LABEL_CONTINUE = "Continue"
LABEL_SUBMIT = "Submit Application"
LABEL_OK = "OK"
SINGLE_PLACEHOLDER = "Type your answer..."
