from file_contexts_gen.cli import main

main()
