"""Output sinks for finished batches."""

from snippetfeed.output.algolia import AlgoliaSink
from snippetfeed.output.sink import JsonFileSink, OutputSink, read_batch

__all__ = ["AlgoliaSink", "JsonFileSink", "OutputSink", "read_batch"]
