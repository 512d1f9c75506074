APP_TITLE = "PriceMe"

# Page titles
PAGE_PRODUCTS = "Products"
PAGE_NEW_PRODUCT = "New Product"
PAGE_MATERIALS = "Materials"
PAGE_SETTINGS = "Settings"

# Buttons
BTN_CREATE = "Create"
BTN_SAVE = "Save"
BTN_DELETE = "Delete"
BTN_CHECK_STOCK = "Check stock"
BTN_DOWNLOAD_SHEET = "Download costing sheet"

# Labels
LBL_BATCH_SIZE = "Batch size"
LBL_PRICING_METHOD = "Pricing method"
LBL_PRICING_VALUE = "Value"
LBL_SEARCH_PRODUCT = "Search products"
LBL_SEARCH_MATERIAL = "Search materials"
LBL_LOW_STOCK_ONLY = "Low stock only"
LBL_STATUS = "Status"

STATUS_LABELS = {
    "draft": "Draft",
    "in_progress": "In progress",
    "on_sale": "On sale",
    "inactive": "Inactive",
}

METHOD_LABELS = {
    "markup": "Markup %",
    "price": "Fixed price",
    "profit": "Profit amount",
    "margin": "Margin %",
}

# Guidance
MSG_NO_PRODUCTS = "No products yet. Create one on the New Product page."
MSG_SUCCESS_PRODUCT = "Product saved"
MSG_SUCCESS_MATERIAL = "Material saved"
MSG_SUCCESS_SETTINGS = "Settings saved"
MSG_STOCK_OK = "Enough stock for this batch."
MSG_STOCK_SHORT = "Not enough stock for this batch."
MSG_ON_SALE_NOTE = "Moving a product to On sale takes one batch of linked materials out of stock."

# Validation
ERR_NAME_REQUIRED = "Name is required."
ERR_GENERIC = "The operation could not be completed."
