"""BDD tests for whole-order fulfillment with a single retry."""

from fulfillment.orchestrator import run_order
from pytest_bdd import parsers, scenarios, then, when

scenarios("features/order_fulfillment.feature")


@when("the order is fulfilled", target_fixture="record")
def fulfill_order(reference, services, config, error):
    try:
        return run_order(reference, services, config)
    except Exception as exc:
        error["exc"] = exc
        return None


@then(parsers.re(r"the order succeeds after (?P<count>\d+) attempts?"), converters={"count": int})
def order_succeeds(record, error, count):
    assert error["exc"] is None
    assert record.attempts == count


@then(parsers.cfparse('the order fails with "{message}"'))
def order_fails(record, error, message):
    assert record is None
    assert str(error["exc"]) == message


@then(parsers.cfparse('the delivery went out by "{channel}"'))
def delivered_by(record, channel):
    assert [receipt.channel for receipt in record.receipts] == [channel]


@then(parsers.cfparse("{count:d} artifact links were delivered"))
def links_delivered(record, count):
    assert len(record.files) == count


@then(parsers.cfparse('the fulfilled tier is "{tier}"'))
def fulfilled_tier(record, tier):
    assert record.intake.tier.value == tier


@then(parsers.cfparse("the checkout session was read {count:d} times"))
def session_reads(services, count):
    assert len(services.session_source.retrieved) == count


@then(parsers.cfparse('operators were alerted in "{handle}"'))
def operators_alerted(services, handle):
    assert services.chat.sent_messages[-1]["handle"] == handle
