"""
Smoke tests to verify all modules can be imported.
"""

def test_import_protein_core():
    import protein_core
    assert hasattr(protein_core, '__version__')


def test_import_protein_io():
    import protein_io
    assert hasattr(protein_io, '__version__')


def test_import_store():
    import store
    assert hasattr(store, '__version__')


def test_import_summarizer():
    import summarizer
    assert hasattr(summarizer, '__version__')
