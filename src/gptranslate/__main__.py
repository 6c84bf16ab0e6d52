from gptranslate.cli import main

main()
