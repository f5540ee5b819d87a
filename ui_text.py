SIZE_LABELS = {
    "small": "Маленький",
    "medium": "Средний",
    "large": "Большой",
}

CURRENCY = "сом"

# Storefront
BRANCHES_TITLE = "Выберите филиал"
BRANCHES_LOAD_FAILED = "Не удалось загрузить филиалы. Проверьте подключение."
BRANCHES_EMPTY = "Филиалы не найдены"
MENU_LOADING = "Загружаем меню..."
MENU_LOAD_FAILED = "Ошибка загрузки меню."
PRODUCTS_EMPTY = "Продукты не найдены."
CHANGE_BRANCH = "Сменить филиал"
BRANCH_SWITCH_BLOCKED = "Заказ уже оформлен: сменить филиал нельзя."
CART_RESET_NOTICE = "Сохранённая корзина повреждена и была очищена."
CHOOSE = "Выбрать"
CLOSE = "Закрыть"
NOT_AVAILABLE = "Нет"
UNNAMED = "Без названия"
NO_ADDRESS = "Адрес не указан"
PLACEHOLDER_IMAGE = "https://via.placeholder.com/300"

# Admin
LOGIN_TITLE = "Вход в админ-панель"
LOGIN_FAILED = "Не удалось войти. Проверьте логин и пароль."
AUTH_CHECKING = "Проверка авторизации..."
ADMIN_TITLE = "Панель управления"
LOGOUT = "Выйти"

ADMIN_TABS = {
    "users": "Пользователи",
    "branch": "Добавить филиал",
    "manageBranches": "Управление филиалами",
    "category": "Добавить категорию",
    "subcategory": "Добавить подкатегорию",
    "manageSubcategories": "Управление подкатегориями",
}

LOAD_ERRORS = {
    "users": "Ошибка при загрузке пользователей",
    "branches": "Ошибка при загрузке филиалов",
    "categories": "Ошибка при загрузке категорий",
    "subcategories": "Ошибка при загрузке подкатегорий",
    "products": "Ошибка при загрузке продуктов",
}

SERVER_ERROR = "Ошибка сервера"
FILL_REQUIRED = "Заполните все обязательные поля"

MESSAGES = {
    "user_deleted": "Пользователь удалён",
    "promo_sent": "Промокод отправлен",
    "branch_created": "Филиал добавлен",
    "branch_updated": "Филиал обновлён",
    "branch_deleted": "Филиал удалён",
    "category_created": "Категория добавлена",
    "category_deleted": "Категория удалена",
    "subcategory_created": "Подкатегория добавлена",
    "subcategory_updated": "Подкатегория обновлена",
    "subcategory_deleted": "Подкатегория удалена",
    "product_created": "Продукт добавлен",
    "product_updated": "Продукт обновлён",
    "product_deleted": "Продукт удалён",
    "draft_restored": "Восстановлен черновик редактирования",
}
