"""
gpioctl State Reporter
Sends the observed pin state to a remote HTTP endpoint.
"""

import asyncio
import logging
from typing import Optional

import aiohttp

from ..core.config import Config
from ..core.errors import NetworkError
from ..core.run import level_name

logger = logging.getLogger(__name__)


class StateReporter:
    """
    HTTP State Reporter

    Issues one GET to ``<url>?pin=<N>&state=<high|low>``, following
    redirects, with a bounded total timeout. Failures never propagate out of
    ``report``; they are logged and reported as ``None``.
    """

    def __init__(self, base_url: str, timeout: float = 5.0, user_agent: str = "gpioctl/1.0"):
        self.base_url = base_url
        self.timeout = timeout
        self.user_agent = user_agent

    @classmethod
    def from_config(cls, config: Config) -> 'StateReporter':
        """Create reporter from configuration"""
        return cls(config.report_url, timeout=config.report_timeout, user_agent=config.user_agent)

    def build_url(self, pin: int, level: bool) -> str:
        """Build the report URL for a pin and level"""
        return f"{self.base_url}?pin={pin}&state={level_name(level)}"

    async def send(self, pin: int, level: bool) -> int:
        """
        Send the report

        Returns:
            HTTP status code of the final response

        Raises:
            NetworkError: connection failure or timeout
        """
        url = self.build_url(pin, level)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        headers = {"User-Agent": self.user_agent}

        try:
            async with aiohttp.ClientSession(timeout=timeout, headers=headers) as session:
                async with session.get(url, allow_redirects=True) as response:
                    await response.read()
                    logger.info(f"[HTTP] GET {url} -> HTTP {response.status}")
                    return response.status
        except asyncio.TimeoutError as e:
            raise NetworkError(url, f"timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise NetworkError(url, str(e) or type(e).__name__) from e

    def report(self, pin: int, level: bool) -> Optional[int]:
        """
        Send the report from synchronous code

        Returns:
            HTTP status code, or None if the request did not complete
        """
        try:
            status = asyncio.run(self.send(pin, level))
        except NetworkError as e:
            logger.error(f"GPIO{pin} state report failed (non-fatal): {e}")
            return None

        if not 200 <= status < 300:
            logger.warning(f"GPIO{pin} state report got HTTP {status} (non-fatal)")
        return status
