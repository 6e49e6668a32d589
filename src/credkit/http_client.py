"""
HTTP client for the remote signature service

This module provides HTTP client functionality for the hosted signature
service: fetching the default partner configuration and requesting
server-side signature generation.
"""

from typing import Dict, Optional, Any
from urllib.parse import urljoin, urlparse
from dataclasses import dataclass
import logging

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .version import __version__
from .exceptions import ServerCommunicationError, ValidationError
from .config.partner_config import PartnerConfig
from .encoding.types import SignatureRequest
from .encoding.utils import is_valid_digest

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_URL = "https://node-encryption.onrender.com/"


@dataclass
class ServiceConfig:
    """Configuration for the remote signature service connection."""
    base_url: str = DEFAULT_SERVICE_URL
    timeout: float = 30.0
    verify_ssl: bool = True
    retry_attempts: int = 3
    retry_backoff_factor: float = 0.3

    def __post_init__(self):
        """Validate service configuration."""
        if not self.base_url:
            raise ValidationError("Service base_url cannot be empty")

        # Ensure base_url ends with /
        if not self.base_url.endswith('/'):
            self.base_url += '/'

        # Validate URL format
        parsed = urlparse(self.base_url)
        if not parsed.scheme or not parsed.netloc:
            raise ValidationError(f"Invalid service URL format: {self.base_url}")

        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive")

        if self.retry_attempts < 0:
            raise ValidationError("Retry attempts must be non-negative")


class SignatureServiceClient:
    """
    HTTP client for the remote signature service.

    Provides default configuration lookup and server-side signature
    generation with automatic retry logic and error handling.
    """

    def __init__(self, config: Optional[ServiceConfig] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Service configuration settings
        """
        self.config = config or ServiceConfig()
        self.session = self._create_session()

        # API endpoints
        self.endpoints = {
            'config': 'api/config',
            'generate_signature': 'api/generate-signature',
        }

        logger.info(f"Initialized signature service client for: {self.config.base_url}")

    def __enter__(self) -> 'SignatureServiceClient':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _create_session(self) -> requests.Session:
        """Create HTTP session with retry logic."""
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=self.config.retry_attempts,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["HEAD", "GET", "OPTIONS", "POST"],
            backoff_factor=self.config.retry_backoff_factor,
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # Set default headers
        session.headers.update({
            'Content-Type': 'application/json',
            'Accept': 'application/json',
            'User-Agent': f'credkit-python/{__version__}'
        })

        return session

    def _make_request(self, method: str, endpoint: str, **kwargs) -> Dict[str, Any]:
        """
        Make HTTP request with error handling.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint path
            **kwargs: Additional arguments for requests

        Returns:
            dict: Response JSON data

        Raises:
            ServerCommunicationError: On HTTP or network errors
        """
        url = urljoin(self.config.base_url, endpoint)

        kwargs.setdefault('timeout', self.config.timeout)
        kwargs.setdefault('verify', self.config.verify_ssl)

        try:
            logger.debug(f"Making {method} request to {url}")
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.Timeout:
            raise ServerCommunicationError(f"Request timeout after {self.config.timeout} seconds", "TIMEOUT")
        except requests.exceptions.ConnectionError as e:
            raise ServerCommunicationError(f"Connection error: {e}", "CONNECTION_ERROR")
        except requests.exceptions.RequestException as e:
            raise ServerCommunicationError(f"Request failed: {e}")

        if not response.ok:
            message = f'HTTP {response.status_code}: {response.reason}'
            try:
                error_data = response.json()
                if isinstance(error_data, dict) and error_data.get('error'):
                    error_info = error_data['error']
                    if isinstance(error_info, dict):
                        message = error_info.get('message', message)
                    else:
                        message = str(error_info)
            except ValueError:
                pass

            raise ServerCommunicationError(
                f"Server request failed: {message}",
                "HTTP_ERROR",
                http_status=response.status_code,
                details={'status_code': response.status_code, 'url': url}
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ServerCommunicationError(f"Invalid JSON response: {e}", "INVALID_RESPONSE",
                                           http_status=response.status_code)

        if not isinstance(data, dict):
            raise ServerCommunicationError("Unexpected response format: expected JSON object",
                                           "INVALID_RESPONSE", http_status=response.status_code)
        return data

    def fetch_default_config(self) -> PartnerConfig:
        """
        Fetch the default partner credentials from the service.

        Returns:
            PartnerConfig: Credentials with source ``remote``

        Raises:
            ServerCommunicationError: On network or server errors
            ConfigurationError: If the response lacks partnerId/partnerKey
        """
        logger.debug("Fetching default partner configuration")
        response = self._make_request('GET', self.endpoints['config'])
        return PartnerConfig.from_dict(response, source="remote")

    def generate_signature(self, partner_id: str, partner_key: str) -> str:
        """
        Request a partner signature from the service.

        Inputs are validated locally first; no request is sent for blank fields.

        Args:
            partner_id: Partner identifier
            partner_key: Partner secret

        Returns:
            str: Signature returned by the service

        Raises:
            ValidationError: If either field is blank
            ServerCommunicationError: On network errors or an unsuccessful response
        """
        request = SignatureRequest(partner_id, partner_key)

        logger.info(f"Requesting signature for partner: {request.partner_id}")
        response = self._make_request(
            'POST',
            self.endpoints['generate_signature'],
            json={
                'partnerId': request.partner_id,
                'partnerKey': request.partner_key,
            }
        )

        if not response.get('success'):
            error = response.get('error') or 'Failed to generate signature'
            raise ServerCommunicationError(str(error), "SIGNATURE_GENERATION_FAILED",
                                           details={'response': response})

        signature = response.get('signature')
        if not isinstance(signature, str) or not signature:
            raise ServerCommunicationError("Response did not include a signature", "INVALID_RESPONSE")

        if not is_valid_digest(signature):
            logger.warning("Service returned a signature that is not a 32-character lowercase hex digest")

        return signature

    def close(self):
        """Close the HTTP session."""
        if hasattr(self, 'session'):
            self.session.close()
            logger.debug("HTTP session closed")


def create_client(
    base_url: str = DEFAULT_SERVICE_URL,
    timeout: float = 30.0,
    verify_ssl: bool = True,
    retry_attempts: int = 3
) -> SignatureServiceClient:
    """
    Create signature service client with default configuration.

    Args:
        base_url: Service base URL
        timeout: Request timeout in seconds
        verify_ssl: Whether to verify SSL certificates
        retry_attempts: Number of retry attempts for failed requests

    Returns:
        SignatureServiceClient: Configured HTTP client
    """
    config = ServiceConfig(
        base_url=base_url,
        timeout=timeout,
        verify_ssl=verify_ssl,
        retry_attempts=retry_attempts
    )
    return SignatureServiceClient(config)
