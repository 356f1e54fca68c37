from fsl_previewer.cli import main

main()
