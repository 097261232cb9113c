from assetfs.cli import main

main()
