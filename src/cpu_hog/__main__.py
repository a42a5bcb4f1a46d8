from cpu_hog.cli import main

if __name__ == "__main__":
    main()
