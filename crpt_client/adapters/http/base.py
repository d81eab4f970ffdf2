from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Mapping


@dataclass(frozen=True)
class TransportResponse:
	"""Status code and raw body text of an HTTP response."""

	status_code: int
	text: str


class AbstractHttpTransport(ABC):
	"""Interface for transports performing a single synchronous POST."""

	@abstractmethod
	def post(
		self,
		url: str,
		*,
		content: str | bytes,
		headers: Mapping[str, str],
	) -> TransportResponse:
		"""Send one POST request and return the response without interpreting it.

		Args:
			url: Absolute endpoint URL.
			content: Encoded request body.
			headers: Request headers.

		Returns:
			TransportResponse: Status code and body text.

		Raises:
			TransportAppError: If the request could not be completed.
		"""
		...

	def close(self) -> None:
		"""Release pooled connections, if any."""
