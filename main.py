"""
Run the Medicare cardiac imaging report pipeline
"""
from cardiac_imaging.pipeline import main

if __name__ == "__main__":
    main()
