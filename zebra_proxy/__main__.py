"""Run the service: python -m zebra_proxy"""

from .app import main

if __name__ == '__main__':
    main()
