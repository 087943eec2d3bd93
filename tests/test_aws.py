"""
Unit tests for the boto3 retry wrapper.
"""

import pytest
import sys
import os
from unittest.mock import AsyncMock, Mock, patch
from botocore.exceptions import ClientError, EndpointConnectionError

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from brand_sentiment.aws import call_with_retries, error_code


def client_error(code):
    return ClientError({'Error': {'Code': code, 'Message': code}}, 'Operation')


class TestCallWithRetries:
    """Test call_with_retries."""

    @pytest.mark.asyncio
    async def test_returns_response(self):
        call = Mock(return_value={'MessageId': 'm-1'})

        assert await call_with_retries("publish", call) == {'MessageId': 'm-1'}
        call.assert_called_once()

    @pytest.mark.asyncio
    async def test_throttling_backs_off_exponentially(self):
        call = Mock(side_effect=[client_error('Throttling'), client_error('ThrottlingException'), 'ok'])

        with patch('brand_sentiment.aws.asyncio.sleep', new=AsyncMock()) as mock_sleep:
            result = await call_with_retries("publish", call, max_retries=3, base_delay=0.5)

        assert result == 'ok'
        assert [c.args[0] for c in mock_sleep.await_args_list] == [0.5, 1.0]

    @pytest.mark.asyncio
    async def test_throttling_on_last_attempt_raises(self):
        call = Mock(side_effect=client_error('Throttling'))

        with patch('brand_sentiment.aws.asyncio.sleep', new=AsyncMock()):
            with pytest.raises(ClientError):
                await call_with_retries("publish", call, max_retries=2)

        assert call.call_count == 2

    @pytest.mark.asyncio
    async def test_other_client_errors_are_not_retried(self):
        call = Mock(side_effect=client_error('AccessDenied'))

        with pytest.raises(ClientError) as excinfo:
            await call_with_retries("publish", call)

        assert error_code(excinfo.value) == 'AccessDenied'
        call.assert_called_once()

    @pytest.mark.asyncio
    async def test_connection_errors_are_retried(self):
        call = Mock(side_effect=[EndpointConnectionError(endpoint_url="https://sns"), 'ok'])

        with patch('brand_sentiment.aws.asyncio.sleep', new=AsyncMock()):
            assert await call_with_retries("publish", call) == 'ok'

        assert call.call_count == 2

    @pytest.mark.asyncio
    async def test_invalid_retry_count(self):
        with pytest.raises(ValueError):
            await call_with_retries("publish", Mock(), max_retries=0)
