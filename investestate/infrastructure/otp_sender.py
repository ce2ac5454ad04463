"""Logging OTP Sender: default OtpSender that writes to the application log.

Invariants:
    - Phone numbers are masked in every log line
    - The code itself is logged only when settings.otp_log_codes is on (development)
"""

import logging

from investestate.core.otp_policy import mask_phone_number

logger = logging.getLogger(__name__)


class LoggingOtpSender:
    def __init__(self, log_codes: bool = False):
        self.log_codes = log_codes

    async def send(self, phone_number: str, code: str) -> None:
        masked = mask_phone_number(phone_number)
        if self.log_codes:
            logger.info(f"OTP for {masked}: {code}", extra={"phone": masked})
        else:
            logger.info(f"OTP issued for {masked}", extra={"phone": masked})
