from file_contexts_gen.pipeline.context_processor import (
    ContextGenerationError,
    ContextProcessor,
    ProcessingStatistics,
    process_file_contexts,
)
from file_contexts_gen.pipeline.tree_scanner import TreeScanner
