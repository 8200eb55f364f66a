"""Parsing of S3 event notifications into dispatch events."""
import urllib.parse
from dataclasses import dataclass


@dataclass(frozen=True)
class DispatchEvent:
    """The uploaded object that triggered a dispatch."""

    bucket: str
    key: str
    event_time: str = ''
    event_name: str = ''


def is_test_event(event: dict) -> bool:
    """Return True for the s3:TestEvent sent when a subscription is created."""
    return event.get('Event') == 's3:TestEvent'


def parse_s3_event(event: dict) -> list:
    """Extract one DispatchEvent per ObjectCreated record.

    Args:
        event: S3 notification as delivered to Lambda.

    Returns:
        list: DispatchEvent objects, in record order. Records for other
            event types are skipped.
    """
    dispatch_events = []
    for record in event.get('Records', []):
        event_name = record.get('eventName', '')
        if not event_name.startswith('ObjectCreated'):
            print(f"Skipping {event_name or 'unnamed'} record")
            continue

        s3 = record['s3']
        dispatch_events.append(DispatchEvent(
            bucket=s3['bucket']['name'],
            # Keys arrive URL-encoded, with spaces as '+'
            key=urllib.parse.unquote_plus(s3['object']['key']),
            event_time=record.get('eventTime', ''),
            event_name=event_name,
        ))
    return dispatch_events
