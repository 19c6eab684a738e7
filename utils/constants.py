"""
utils/constants.py

Purpose: Centralized static content

- All user-facing messages (Telegram HTML)
- Menu labels and callback identifiers
- Category labels

(Prevents hardcoding across the codebase)
"""

# ============================================================
# CATEGORIES
# ============================================================

CATEGORY_LABELS = {
    "auto": "🚗 Auto",
    "tech": "📱 Tech",
    "real_estate": "🏠 Real estate",
    "clothing": "👗 Clothing & shoes",
    "other": "📦 Other",
    "pets": "🐾 Pet supplies",
}

UNKNOWN_CATEGORY_LABEL = "📦 Uncategorized"

# ============================================================
# MAIN MENU (reply keyboard labels)
# ============================================================

MENU_SUBMIT_AD = "📝 Submit ad"
MENU_CITY_ADS = "📍 Ads in my city"
MENU_FILTER_BY_CATEGORY = "🗂 Filter by category"
MENU_CHANNEL = "📢 Ads channel"
MENU_HELP = "❓ Help"
MENU_MY_ADS = "📋 My ads"

MAIN_MENU_LAYOUT = [
    [MENU_SUBMIT_AD],
    [MENU_CITY_ADS, MENU_FILTER_BY_CATEGORY],
    [MENU_CHANNEL, MENU_HELP],
    [MENU_MY_ADS],
]

MENU_LABELS = frozenset(label for row in MAIN_MENU_LAYOUT for label in row)

# ============================================================
# COMMANDS & CALLBACKS
# ============================================================

COMMAND_START = "start"
COMMAND_SET_LOCATION = "setlocation"
COMMAND_CANCEL = "cancel"

# Commands that pass the location gate
LOCATION_GATE_ALLOWED_COMMANDS = frozenset({
    COMMAND_START,
    COMMAND_SET_LOCATION,
    COMMAND_CANCEL,
})

CATEGORY_CALLBACK_PREFIX = "category_"
FILTER_CALLBACK_PREFIX = "filter_"
MORE_ADS_CALLBACK = "more_ads"
PUBLISH_WITHOUT_MEDIA_CALLBACK = "submit_publish"

# ============================================================
# WELCOME & LOCATION
# ============================================================

WELCOME_MESSAGE = "🎉 Welcome! Use the menu below to get around."

ASK_LOCATION_MESSAGE = """📍 <b>Where are you?</b>

Send your country and city, for example: <i>Russia Moscow</i>
A city on its own works too: <i>Berlin</i>"""

LOCATION_INVALID_MESSAGE = """⚠️ I couldn't read a location from that.

Please send your country and city, for example: <i>Russia Moscow</i>"""

LOCATION_SAVED_MESSAGE = "✅ Location saved: <b>{location}</b>"

LOCATION_REQUIRED_WARNING = """⚠️ First tell me your country and city, for example: <i>Russia Moscow</i>

Or use /cancel."""

LOCATION_MISSING_MESSAGE = "⚠️ You haven't set your location yet. Send your country and city, for example: <i>Russia Moscow</i>"

# ============================================================
# AD SUBMISSION FLOW
# ============================================================

SELECT_CATEGORY_MESSAGE = "Choose a category for your ad:"

SELECT_CATEGORY_REPROMPT = "❗ Please choose a category using the buttons above first."

CATEGORY_SELECTED_MESSAGE = """You picked <b>{category}</b>.

1. Send the ad description.
2. Attach a photo, video or file (optional).

To cancel, send /cancel"""

CATEGORY_CHANGED_MESSAGE = "Category changed to <b>{category}</b>."

DESCRIPTION_EMPTY_MESSAGE = "❌ The description can't be empty."
DESCRIPTION_COMMAND_MESSAGE = "❌ The description can't start with \"/\"."
DESCRIPTION_TOO_LONG_MESSAGE = "❌ The description is too long. Please keep it under {limit} characters."

ASK_MEDIA_MESSAGE = """📎 Now send a photo, video or file if you want one on the ad.

Or publish it as text only."""

MEDIA_STAGED_MESSAGE = "📎 Got your file. Now send the ad description as text."

UNSUPPORTED_CONTENT_MESSAGE = "⚠️ I can only take text, a photo, a video or a file here."

COMMANDS_DISABLED_MESSAGE = "⛔ Commands aren't available while you're submitting an ad. Send the description, use the buttons, or /cancel."

SUBMISSION_IN_PROGRESS_MESSAGE = "⛔ You're in the middle of submitting an ad. Finish it or send /cancel."

SUBMISSION_INTERRUPTED_MESSAGE = "❌ Ad submission cancelled."

SUBMISSION_EXPIRED_MESSAGE = "⌛ Your unfinished ad was discarded after a period of inactivity."

AD_PUBLISHED_MESSAGE = "✅ Your ad has been added and published!"

AD_PUBLISH_FAILED_MESSAGE = "❌ Couldn't add your ad. Please try again later."

STALE_BUTTON_MESSAGE = "⚠️ That button is no longer active. Use the menu below."

CANCELLED_MESSAGE = "❌ Cancelled."

BUTTON_PUBLISH_WITHOUT_MEDIA = "✅ Publish without media"

# ============================================================
# LISTING
# ============================================================

SELECT_FILTER_MESSAGE = "Choose a category:"

NO_ADS_IN_CITY_MESSAGE = "🔍 No ads in <b>{city}</b>{category_suffix} yet."

NO_ADS_IN_COUNTRY_MESSAGE = "🔍 No ads in <b>{country}</b>{category_suffix} yet either."

NO_ADS_MESSAGE = "🔍 No ads{category_suffix} yet."

BROADENED_RESULTS_MESSAGE = "ℹ️ Nothing in <b>{city}</b> yet. You might like these ads from <b>{country}</b>:"

NO_MORE_ADS_MESSAGE = "🔚 No more ads."

SHOW_MORE_PROMPT = "⬇️ Show more?"
BUTTON_SHOW_MORE = "Show more"

CATEGORY_SUFFIX = " in category {category}"

LISTING_EXPIRED_MESSAGE = "⚠️ This list has expired. Press \"{label}\" to start again."

UNKNOWN_FILTER_MESSAGE = "⚠️ Unknown category."

NO_OWN_ADS_MESSAGE = "You haven't published any ads yet."

# ============================================================
# CHANNEL & HELP
# ============================================================

CHANNEL_MESSAGE = "All published ads are here 👇"
BUTTON_OPEN_CHANNEL = "Open channel"

HELP_MESSAGE = """❓ <b>Help</b>

📝 Submit ad: pick a category, send a description and optionally a photo, video or file.
📍 Ads in my city: the newest ads near you.
🗂 Filter by category: the same, for one category.

Change your location any time with /setlocation.
For anything else contact the administrator: {contact}"""

# ============================================================
# ERRORS
# ============================================================

USE_MENU_MESSAGE = "Please use the menu buttons below."

UNKNOWN_COMMAND_MESSAGE = "🤔 I don't know that command. Please use the menu."

GENERIC_ERROR_MESSAGE = "❌ Something went wrong. Please try again later."

# ============================================================
# AD RENDERING
# ============================================================

ANNOUNCEMENT_TEMPLATE = """📢 <b>New ad!</b>

📂 <b>Category:</b> <i>{category}</i>
📝 <b>Description:</b> {description}

📅 {date}{location_line}"""

ANNOUNCEMENT_LOCATION_LINE = "\n📍 <b>Location:</b> {location}"

LISTING_TEMPLATE = """📂 <b>{category}</b>
📝 {description}{location_line}
📅 {date}"""

LISTING_LOCATION_LINE = "\n📍 {location}"
