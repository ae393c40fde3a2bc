from pytest import raises

from tree_mirror import MirrorStateError, MutationSummary, RelaySummarizer


def test_deliver():
    summarizer = RelaySummarizer()
    batches: list[list[MutationSummary]] = []

    subscription = summarizer.subscribe(
        "root", [{"all": True}, {"characterData": True}], batches.append
    )
    assert subscription.active

    summary = MutationSummary(added=["node"])
    summarizer.deliver(summary)

    # missing summaries for extra queries are padded with empty ones
    assert batches == [[summary, MutationSummary()]]

    subscription.disconnect()
    assert not subscription.active

    summarizer.deliver(summary)
    assert len(batches) == 1

    # disconnecting twice is harmless
    subscription.disconnect()


def test_reentrant_delivery():
    summarizer = RelaySummarizer()

    def callback(summaries: list[MutationSummary]):
        summarizer.deliver(MutationSummary())

    summarizer.subscribe("root", [{"all": True}], callback)

    with raises(MirrorStateError):
        summarizer.deliver(MutationSummary())

    # delivery state is reset after the error
    summarizer.subscriptions[0].disconnect()
    summarizer.deliver(MutationSummary())
