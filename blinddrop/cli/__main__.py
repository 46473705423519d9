from blinddrop.cli import main

main()
