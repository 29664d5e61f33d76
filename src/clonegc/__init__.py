"""Copy-on-write clone lineage garbage collector for Ceph RBD pools."""
