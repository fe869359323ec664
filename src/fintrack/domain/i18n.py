"""Translations and the persisted language preference."""

import logging
from typing import Optional

from fintrack.database.base import Database
from fintrack.domain.errors import ValidationError

logger = logging.getLogger(__name__)

LANGUAGE_KEY = "language"
DEFAULT_LANGUAGE = "en"

RESOURCES: dict[str, dict[str, str]] = {
    "en": {
        "financeTracker": "Personal Finance Tracker",
        "welcome": "Welcome,",
        "logout": "Logout",
        "signIn": "Sign in",
        "signUp": "Sign up",
        "username": "Username",
        "email": "Email",
        "password": "Password",
        "balance": "Balance",
        "income": "Income",
        "expenses": "Expenses",
        "addTransaction": "Add Transaction",
        "transactionType": "Transaction Type",
        "amount": "Amount",
        "description": "Description",
        "date": "Date",
        "incomeLabel": "Income",
        "expenseLabel": "Expense",
        "add": "Add",
        "edit": "Edit",
        "remove": "Remove",
        "deleteConfirmation": "Are you sure you want to delete this transaction?",
        "food": "Food",
        "other": "Other",
        "save": "Save",
        "update": "Update",
        "success": "Success",
        "error": "Error",
        "noData": "No data available",
        "tryAgain": "Please try again",
    },
    "vi": {
        "financeTracker": "Quản Lý Tài Chính Cá Nhân",
        "welcome": "Chào mừng,",
        "logout": "Đăng xuất",
        "signIn": "Đăng nhập",
        "signUp": "Đăng ký",
        "username": "Tên đăng nhập",
        "email": "Email",
        "password": "Mật khẩu",
        "balance": "Số dư",
        "income": "Thu nhập",
        "expenses": "Chi tiêu",
        "addTransaction": "Thêm giao dịch",
        "transactionType": "Loại giao dịch",
        "amount": "Số tiền",
        "description": "Mô tả",
        "date": "Ngày",
        "incomeLabel": "Thu nhập",
        "expenseLabel": "Chi tiêu",
        "add": "Thêm",
        "edit": "Sửa",
        "remove": "Xóa",
        "deleteConfirmation": "Bạn có chắc chắn muốn xóa giao dịch này?",
        "food": "Đồ ăn",
        "other": "Khác",
        "save": "Lưu",
        "update": "Cập nhật",
        "success": "Thành công",
        "error": "Lỗi",
        "noData": "Không có dữ liệu",
        "tryAgain": "Vui lòng thử lại",
    },
}

SUPPORTED_LANGUAGES = tuple(RESOURCES)


def validate_language(language: str) -> str:
    code = (language or "").strip().lower()
    if code not in RESOURCES:
        raise ValidationError(
            f"Unsupported language '{language}'. Supported: {', '.join(SUPPORTED_LANGUAGES)}"
        )
    return code


class Translator:
    """Look up UI strings for one language."""

    def __init__(self, language: str = DEFAULT_LANGUAGE):
        self.language = validate_language(language)

    def t(self, key: str, default: Optional[str] = None) -> str:
        """Translate a key.

        Falls back to default, then to the key itself.
        """
        value = RESOURCES[self.language].get(key)
        if value is not None:
            return value
        return default if default is not None else key


class LanguageService:
    """Read and persist the preferred language."""

    def __init__(self, db: Database):
        """Initialize language service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_language(self) -> str:
        """Stored language, or "en" when unset or no longer supported."""
        stored = self.db.get_setting(LANGUAGE_KEY)
        if stored in RESOURCES:
            return stored
        return DEFAULT_LANGUAGE

    def set_language(self, language: str) -> str:
        """Persist the preferred language.

        Raises:
            ValidationError: If the language isn't supported
        """
        code = validate_language(language)
        self.db.set_setting(LANGUAGE_KEY, code)
        logger.info("Language set to %s", code)
        return code

    def translator(self, override: Optional[str] = None) -> Translator:
        """Translator for the override language, else the stored one."""
        return Translator(override or self.get_language())
