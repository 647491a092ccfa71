"""
Stone slab quotation builder.

Pure Python, single session, in-memory.
Slab line items go in through QuotationStore, net areas and totals come out
of PricingEngine, and the preview and PDF adapters render the same snapshot.
"""
