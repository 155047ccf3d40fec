# tests/services/test_validation.py
import pytest

from org_registry.services.validation import is_valid_email, is_valid_org_name

@pytest.mark.parametrize("email", ["a@x.com", "john.doe+orgs@mail.example.io", "ops_team@corp.co"])
def test_valid_emails(email):
    assert is_valid_email(email)

@pytest.mark.parametrize("email", [
    "not-an-email",
    "a@x",
    "A@X.COM",
    "a@x.company",
    "a b@x.com",
    "a@x.com\n",
    "",
    None,
])
def test_invalid_emails(email):
    assert not is_valid_email(email)

@pytest.mark.parametrize("name", ["AcmeCorp", "acme_corp", "Acme2024", "_"])
def test_valid_org_names(name):
    assert is_valid_org_name(name)

@pytest.mark.parametrize("name", ["acme corp!", "acme-corp", "acme.corp", "", "AcmeCorp\n", None])
def test_invalid_org_names(name):
    assert not is_valid_org_name(name)
