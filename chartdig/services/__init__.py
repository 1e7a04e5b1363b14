"""Services: record source, materializer, retention and the extract pipeline."""
