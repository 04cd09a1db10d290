import logging
import os
from logging.handlers import RotatingFileHandler
from typing import List

import requests
import colorlog


def setup_logging() -> None:
    """Configure the centralised logging settings."""
    log_level = os.getenv('SCHEDULER_LOG_LEVEL', 'INFO').upper()
    log_file = os.getenv('SCHEDULER_LOG_FILE')
    max_bytes = int(os.getenv('LOG_FILE_MAX_BYTES', '10485760'))  # 10 MB
    backup_count = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))
    postmark_api_token = os.getenv('POSTMARK_API_TOKEN')
    postmark_sender_email = os.getenv('POSTMARK_SENDER_EMAIL')
    postmark_receiver_emails = os.getenv('POSTMARK_RECEIVER_EMAILS')
    postmark_alert_subject = os.getenv('POSTMARK_ALERT_SUBJECT', 'Show Scheduler Error Alert')

    logger = logging.getLogger()
    logger.setLevel(log_level)

    if logger.hasHandlers():
        return

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(
        colorlog.ColoredFormatter(
            "%(log_color)s%(levelname)s:%(name)s:%(message)s",
            log_colors={
                'DEBUG': 'bold_blue',
                'INFO': 'bold_green',
                'WARNING': 'bold_yellow',
                'ERROR': 'bold_red',
                'CRITICAL': 'bold_purple'
            }
        )
    )
    logger.addHandler(console_handler)

    if log_file:
        file_handler = RotatingFileHandler(log_file, maxBytes=max_bytes, backupCount=backup_count)
        file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s - (%(filename)s:%(lineno)d)'
            )
        )
        logger.addHandler(file_handler)

    # Failed saves are the only hard errors, so they are the ones worth an e-mail
    if postmark_api_token and postmark_sender_email and postmark_receiver_emails:
        alert_handler = PostmarkAlertHandler(
            api_token=postmark_api_token,
            sender_email=postmark_sender_email,
            receiver_emails=[email.strip() for email in postmark_receiver_emails.split(',')],
            subject=postmark_alert_subject
        )
        alert_handler.setLevel(logging.ERROR)
        logger.addHandler(alert_handler)


class PostmarkAlertHandler(logging.Handler):
    """Logging handler that e-mails error records through Postmark."""

    POSTMARK_URL = 'https://api.postmarkapp.com/email'

    def __init__(self, api_token: str, sender_email: str, receiver_emails: List[str], subject: str) -> None:
        """
        Initialize the handler.

        Args:
            api_token: Postmark server token.
            sender_email: Sender address.
            receiver_emails: Recipient addresses.
            subject: Subject line for alert e-mails.
        """
        super().__init__()
        self.api_token = api_token
        self.sender_email = sender_email
        self.receiver_emails = receiver_emails
        self.subject = subject

    def build_payload(self, record: logging.LogRecord) -> dict:
        return {
            'From': self.sender_email,
            'To': ','.join(self.receiver_emails),
            'Subject': f"{self.subject}: {record.name}",
            'TextBody': self.format(record)
        }

    def emit(self, record: logging.LogRecord) -> None:
        headers = {
            'X-Postmark-Server-Token': self.api_token,
            'Content-Type': 'application/json'
        }
        try:
            response = requests.post(
                self.POSTMARK_URL, json=self.build_payload(record), headers=headers, timeout=10
            )
            response.raise_for_status()
        except requests.RequestException:
            self.handleError(record)
