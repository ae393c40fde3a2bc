from abc import ABCMeta

import tree_mirror


def test_import():
    # make sure symbols are accessible by fully qualified path
    assert isinstance(tree_mirror.core.mirror.TreeMirror, ABCMeta)
    assert isinstance(tree_mirror.core.host.HostTree, ABCMeta)
    assert isinstance(tree_mirror.core.summary.Summarizer, ABCMeta)
    assert isinstance(tree_mirror.core.serializer.Serializer, type)
    assert isinstance(tree_mirror.core.registry.IdentityRegistry, type)
    assert isinstance(tree_mirror.lib.memory.MemoryTree, ABCMeta)

    # rolled up to top level
    for sym in [
        "TreeMirror",
        "Serializer",
        "MirrorClient",
        "ChangeSet",
        "MovedRecord",
        "MirrorDelegate",
        "RelaySummarizer",
        "MemoryTree",
        "UnsupportedNodeTypeError",
    ]:
        assert sym in tree_mirror.__all__

    # builders stay in their module
    assert "element" not in tree_mirror.__all__

    # ensure no internal symbols accidentally exported
    assert all([not sym.startswith("_") for sym in tree_mirror.__all__])
