from keepc.main import main

main()
