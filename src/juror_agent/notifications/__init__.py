from juror_agent.notifications.telegram import TelegramNotifier, format_cycle_message

__all__ = ["TelegramNotifier", "format_cycle_message"]
