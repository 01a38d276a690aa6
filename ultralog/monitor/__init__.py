"""Client that receives logger entries and keeps statistics on them."""