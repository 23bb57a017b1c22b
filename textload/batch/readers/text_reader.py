"""
Text line reader using Spark for batch loads.
"""

from pyspark import RDD, SparkContext

TEXT_INPUT_FORMAT = "org.apache.hadoop.mapred.TextInputFormat"
LONG_WRITABLE = "org.apache.hadoop.io.LongWritable"
TEXT = "org.apache.hadoop.io.Text"


class TextLineReader:
    """
    Reads text files line by line into RDDs.

    Lines come back without terminators. Partitioning is left to Spark and
    Hadoop's input format (at least SparkContext.defaultMinPartitions splits
    per splittable file).
    """

    def __init__(self, sc: SparkContext):
        self.sc = sc

    def lines(self, path: str) -> RDD:
        """RDD of the lines of path."""
        return self.sc.textFile(path)

    def lines_with_offsets(self, path: str) -> RDD:
        """
        RDD of (byte_offset, line) pairs of path.

        The offset is the position of the line's first byte in its file, as
        reported by Hadoop's TextInputFormat.
        """
        return self.sc.hadoopFile(path, TEXT_INPUT_FORMAT, LONG_WRITABLE, TEXT)
