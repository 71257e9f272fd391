from unittest.mock import AsyncMock, patch

import pytest
from celery.exceptions import Reject

from stockk.tasks.domain.exceptions import AlertTaskFailedException, MalformedTaskPayloadException
from stockk.tasks.worker import send_low_stock_alert

PAYLOAD = '{"ingredients": [{"id": 3, "name": "Onion", "total_stock": 1000, "current_stock": 480}]}'


def test_task_runs_processor_with_payload():
    with patch("stockk.tasks.worker._process_payload", new=AsyncMock()) as mock_process:
        send_low_stock_alert(PAYLOAD, max_retry=3)
    mock_process.assert_awaited_once_with(PAYLOAD)


def test_malformed_payload_is_rejected_without_requeue():
    failure = AsyncMock(side_effect=MalformedTaskPayloadException("illisible"))
    with patch("stockk.tasks.worker._process_payload", new=failure):
        with pytest.raises(Reject) as exc_info:
            send_low_stock_alert("not json")
    assert exc_info.value.requeue is False


def test_retryable_failure_is_retried():
    failure = AsyncMock(side_effect=AlertTaskFailedException("marquage impossible"))
    with patch("stockk.tasks.worker._process_payload", new=failure):
        # Appel direct (hors worker): Task.retry relève l'exception d'origine
        with pytest.raises(AlertTaskFailedException):
            send_low_stock_alert(PAYLOAD, max_retry=3)


def test_task_is_registered_under_queue_task_name():
    assert send_low_stock_alert.name == "task:send_low_stock_alert"
