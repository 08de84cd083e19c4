"""System configuration keys."""


class ConfigKeys:
    """Keys for system configuration values stored in database."""

    # Follow-up configuration
    FOLLOW_UP_WINDOW_DAYS = "follow_up_window_days"
    REACTIVATION_DAYS = "reactivation_days"
    RETURN_BUFFER_DAYS = "return_buffer_days"

    # Calendar viewport fallback when no day is open
    FALLBACK_START_HOUR = "fallback_start_hour"
    FALLBACK_END_HOUR = "fallback_end_hour"

    # Conversion funnel
    EVALUATION_SPECIALISTS = "evaluation_specialists"


class ConfigDefaults:
    """Default values for system configuration."""

    FOLLOW_UP_WINDOW_DAYS = "40"
    REACTIVATION_DAYS = "330"
    RETURN_BUFFER_DAYS = "1"

    FALLBACK_START_HOUR = "9"
    FALLBACK_END_HOUR = "18"

    EVALUATION_SPECIALISTS = "D.G.,Evaluación,Evaluacion"
