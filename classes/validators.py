# validators.py
import bleach

from classes.errors import ValidationError

ALLOWED_TAGS = {"b", "i", "u", "strong", "em", "p", "br", "ul", "ol", "li", "a", "blockquote"}


def validate_length(field_name, value, max_length):
    if len(value) > max_length:
        raise ValidationError(f"{field_name} must be {max_length} characters or fewer.")

def validate_required_text(field_name, value):
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()

def validate_id(field_name, value):
    """Accept ints and numeric strings; reject booleans, blanks and anything else."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    try:
        number = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")
    if number <= 0:
        raise ValidationError(f"{field_name} must be positive")
    return number

def validate_rating(rating):
    if rating is None:
        return None
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise ValidationError("Rating must be an integer between 1 and 5")
    if rating < 1 or rating > 5:
        raise ValidationError("Rating must be between 1 and 5")
    return rating

def validate_question_count(value, maximum):
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("question_count must be an integer")
    if value < 1 or value > maximum:
        raise ValidationError(f"question_count must be between 1 and {maximum}")
    return value

def validate_options(options, min_options, max_options):
    """Options need text, and exactly one of them must be correct."""
    if not isinstance(options, list):
        raise ValidationError("'options' must be a list.")
    if len(options) < min_options or len(options) > max_options:
        raise ValidationError(f"A question needs between {min_options} and {max_options} options")

    cleaned = []
    for option in options:
        if not isinstance(option, dict):
            raise ValidationError("Each option must be an object.")
        text = option.get("option_text")
        if not isinstance(text, str) or not text.strip():
            raise ValidationError("All answer options must be filled")
        cleaned.append({"option_text": text.strip(), "is_correct": option.get("is_correct") is True})

    correct = sum(1 for option in cleaned if option["is_correct"])
    if correct == 0:
        raise ValidationError("Please select the correct answer")
    if correct > 1:
        raise ValidationError("A question must have exactly one correct option")
    return cleaned

def sanitize_rich_text(value):
    # Sanitize text input
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("Text fields must be strings")
    return bleach.clean(value, tags=ALLOWED_TAGS, strip=True).strip() or None
