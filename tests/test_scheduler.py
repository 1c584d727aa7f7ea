"""Tests for the asyncio and thread schedulers driving the debounced autosave."""

import asyncio
import json
import threading
import time

import pytest

from formwizard.config.models import AutosaveConfig, WizardSettings
from formwizard.wizard.controller import WizardController
from formwizard.wizard.persistence import DraftPersistence, SaveStatus
from formwizard.wizard.scheduler import AsyncioScheduler, ThreadScheduler
from formwizard.wizard.state import initialize


def _wait_for(condition, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.01)
    return condition()


@pytest.mark.asyncio
async def test_asyncio_rapid_edits_write_once(seller_flow, store) -> None:
    drafts = DraftPersistence(seller_flow, store, AsyncioScheduler(), delay=0.05)
    data = initialize(seller_flow).form_data

    drafts.schedule({**data, "location": "Berlin"})
    await asyncio.sleep(0.01)
    drafts.schedule({**data, "location": "Berlin, DE"})
    assert store.writes == []

    await asyncio.sleep(0.2)
    assert len(store.writes) == 1
    assert json.loads(store.writes[0][1])["location"] == "Berlin, DE"
    assert drafts.status == SaveStatus.SAVED


@pytest.mark.asyncio
async def test_asyncio_explicit_loop(seller_flow, store) -> None:
    scheduler = AsyncioScheduler(asyncio.get_running_loop())
    drafts = DraftPersistence(seller_flow, store, scheduler, delay=0.01)
    drafts.schedule(initialize(seller_flow).form_data)
    await asyncio.sleep(0.1)
    assert len(store.writes) == 1


def test_thread_rapid_edits_write_once(seller_flow, store) -> None:
    drafts = DraftPersistence(seller_flow, store, ThreadScheduler(), delay=0.05)
    data = initialize(seller_flow).form_data

    drafts.schedule({**data, "location": "Berlin"})
    drafts.schedule({**data, "location": "Berlin, DE"})

    assert _wait_for(lambda: drafts.status == SaveStatus.SAVED)
    time.sleep(0.1)
    assert len(store.writes) == 1
    assert json.loads(store.writes[0][1])["location"] == "Berlin, DE"


def test_thread_timer_cancelled_by_discard(seller_flow, store) -> None:
    drafts = DraftPersistence(seller_flow, store, ThreadScheduler(), delay=0.05)
    drafts.schedule(initialize(seller_flow).form_data)
    drafts.discard()
    time.sleep(0.15)
    assert store.writes == []


def test_sync_edits_without_running_loop(buyer_flow, store) -> None:
    """The default scheduler works for hosts that edit outside an event loop."""
    settings = WizardSettings(autosave=AutosaveConfig(delay_ms=20))
    controller = WizardController(buyer_flow, store=store, settings=settings)

    controller.update_field("name", "Ada")
    controller.update_field("company", "Acme")

    assert _wait_for(lambda: len(store.writes) == 1)
    assert json.loads(store.writes[0][1])["company"] == "Acme"


def test_sync_edits_flush_without_waiting(buyer_flow, store) -> None:
    controller = WizardController(buyer_flow, store=store)
    controller.update_field("name", "Ada")
    assert controller.flush_draft() is True
    assert store.get("buyerOnboardingForm") is not None


class SlowStore:
    """Memory store whose writes block until released."""

    def __init__(self):
        self.data = {}
        self.entered = threading.Event()
        self.release = threading.Event()

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.entered.set()
        self.release.wait(2.0)
        self.data[key] = value

    def delete(self, key):
        self.data.pop(key, None)


def test_discard_waits_for_write_in_progress(seller_flow) -> None:
    store = SlowStore()
    drafts = DraftPersistence(seller_flow, store, ThreadScheduler(), delay=0.0)
    drafts.schedule(initialize(seller_flow, {"name": "Grace"}).form_data)
    assert store.entered.wait(2.0)

    discarder = threading.Thread(target=drafts.discard)
    discarder.start()
    time.sleep(0.05)
    store.release.set()
    discarder.join(2.0)

    assert not discarder.is_alive()
    assert store.get("sellerOnboardingForm") is None
