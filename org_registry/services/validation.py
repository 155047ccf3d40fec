import re

EMAIL_PATTERN = re.compile(r"^[a-z0-9._%+\-]+@[a-z0-9.\-]+\.[a-z]{2,4}$")
ORG_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+$")

def is_valid_email(email) -> bool:
    """소문자 local-part, 도메인, 2~4자 TLD로 이루어진 이메일인지 검사합니다."""
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None

def is_valid_org_name(org_name) -> bool:
    """영문자, 숫자, 밑줄(_)만으로 이루어진 비어있지 않은 이름인지 검사합니다."""
    return isinstance(org_name, str) and ORG_NAME_PATTERN.fullmatch(org_name) is not None
