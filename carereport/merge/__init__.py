"""Record linkage package.

Links evaluation rows to resident rows by canonical name key and produces
the ``MergedResident`` records consumed by the report assembler.
"""
