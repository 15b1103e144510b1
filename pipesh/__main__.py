from pipesh.shell import main

main()
